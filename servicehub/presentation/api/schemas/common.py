from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _check_email_format(value: str) -> str:
    # Stored emails match exactly, so the submitted text is kept as-is.
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"value is not a valid email address: {exc}") from exc
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email_format)]


class CamelModel(BaseModel):
    """Schema whose JSON keys are camelCase while Python attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    message: str
