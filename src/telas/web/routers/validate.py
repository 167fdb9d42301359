"""Job configuration validation endpoints."""

from fastapi import APIRouter

from telas.application.config import load_config_from_dict, validate_config
from telas.web.schemas.requests import ConfigValidateRequest
from telas.web.schemas.responses import ValidationResultSchema

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidationResultSchema)
def validate_configuration(
    request: ConfigValidateRequest,
) -> ValidationResultSchema:
    """Validate a job configuration without packing it for output.

    Schema errors are raised as ConfigError and reported by its handler.
    """
    config = load_config_from_dict(request.config)
    result = validate_config(config)

    return ValidationResultSchema(
        is_valid=result.is_valid,
        errors=[{"message": e.message, "path": e.path} for e in result.errors],
        warnings=[
            {"message": w.message, "path": w.path, "suggestion": w.suggestion}
            for w in result.warnings
        ],
    )
