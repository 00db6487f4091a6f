from .upload import (
    SECRET_KEYS,
    VARIABLE_KEYS,
    UploadPlan,
    UploadResult,
    apply_secrets,
    apply_variables,
    match_repository,
    plan_upload,
)

__all__ = [
    "SECRET_KEYS",
    "VARIABLE_KEYS",
    "UploadPlan",
    "UploadResult",
    "apply_secrets",
    "apply_variables",
    "match_repository",
    "plan_upload",
]
