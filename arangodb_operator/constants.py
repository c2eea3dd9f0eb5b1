"""
Shared module to hold constant values for the library
"""

# Sentinel secret name meaning "this feature is switched off"
SECRET_NAME_NONE = "None"

# Sentinel password secret name meaning "generate a name for me"
SECRET_NAME_AUTO = "Auto"

# Name of the built-in administrative database user
USER_NAME_ROOT = "root"

# Suffix appended to "<deployment>-<user>" for generated password secrets
PASSWORD_SECRET_SUFFIX = "password"

# Suffixes used to build the cluster-wide default secret names
JWT_SECRET_SUFFIX = "jwt"
CA_SECRET_SUFFIX = "ca"

# Maximum length of a resource name in the cluster
MAX_RESOURCE_NAME_LENGTH = 253

# Resource key used for persistent storage requests
RESOURCE_STORAGE = "storage"

# Claim condition type set by the platform while an online resize waits for
# the filesystem to be grown by the consuming pod
CLAIM_CONDITION_FILE_SYSTEM_RESIZE_PENDING = "FileSystemResizePending"

# Delimiter used for nested dict keys
NESTED_DICT_DELIM = "."

# Event types
EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"

# Stable event reason codes
EVENT_REASON_CANNOT_CHANGE_STORAGE_CLASS = "CannotChangeStorageClass"
EVENT_REASON_STORAGE_CLAIM_READ_FAILED = "StorageClaimReadFailed"
EVENT_REASON_IMMUTABLE_FIELDS_RESET = "ImmutableFieldsReset"

# Policies for handling edits to immutable spec fields
IMMUTABLE_POLICY_HEAL = "heal"
IMMUTABLE_POLICY_REJECT = "reject"
