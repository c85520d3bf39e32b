class HiveError(Exception):
    code = "E_HIVE_ERROR"


class HiveNotFoundError(HiveError):
    code = "E_HIVE_NOT_FOUND"


class HiveIntegrityError(HiveNotFoundError):
    """More than one hive row matched a lookup that must be unique."""

    code = "E_HIVE_NOT_FOUND"


class HiveAccessError(HiveError):
    code = "E_HIVE_ACCESS_DENIED"


class HiveDependencyError(HiveError):
    code = "E_HIVE_DEPENDENCY_FAILED"


class HiveConfigurationError(HiveError):
    code = "E_HIVE_CONFIGURATION_INVALID"
