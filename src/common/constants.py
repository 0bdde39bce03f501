"""Shared constants for the component catalog tools.

For environment-based configuration, use the env module:
    from common.env import env
    base_url = env.catalog_base_url()
"""

SERVER_NAME = "component-catalog"
SERVER_VERSION = "1.0.0"

USER_AGENT = f"{SERVER_NAME}/{SERVER_VERSION}"

# Static JSON directory holding index.json and components/<Name>.json
DEFAULT_CATALOG_BASE_URL = (
    "https://raw.githubusercontent.com/evgenyshkuratov-rgb/android-components/main/specs"
)
INDEX_DOCUMENT = "index.json"
COMPONENTS_DIR = "components"

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "main"

# Seconds
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_GIT_TIMEOUT = 15.0

# Changed paths under these prefixes affect catalog content
COMPONENT_PATH_PREFIXES: tuple[str, ...] = ("components/", "specs/")
