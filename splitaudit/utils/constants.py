"""Centralized constants for splitaudit.

Single source of truth for file names, directories and registry endpoints.
"""


# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Per-project state directory under the audited root (config.json, error.log)
STATE_DIR_NAME = ".splitaudit"

ERROR_LOG_NAME = "error.log"
CONFIG_FILE_NAME = "config.json"

# ============================================================================
# NPM PROJECT FILES
# ============================================================================

PACKAGE_JSON = "package.json"
SHRINKWRAP_JSON = "npm-shrinkwrap.json"
PACKAGE_LOCK_JSON = "package-lock.json"

# ============================================================================
# REGISTRY
# ============================================================================

DEFAULT_REGISTRY = "https://registry.npmjs.org"
AUDIT_ENDPOINT = "/-/npm/v1/security/audits"

# Versions reported in request metadata when the local toolchain is unknown
DEFAULT_NPM_VERSION = "6.14.18"
DEFAULT_NODE_VERSION = "v14.21.3"

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_PREFIX = "SPLITAUDIT_"
ENV_NPM_VERSION = "SPLITAUDIT_NPM_VERSION"
ENV_NODE_VERSION = "SPLITAUDIT_NODE_VERSION"
