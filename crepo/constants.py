from .typed_path import RelFile

CREPO_NAME: str = "crepo"
CREPO_FILE: RelFile = RelFile("crepo.yaml")
DEFAULT_REMOTE_NAME: str = "origin"

LOADING_SUFFIX: str = "..."
DONE_SUFFIX: str = "[done]"
FAILURE_SUFFIX: str = "[failed]"
