from pydantic import BaseModel, ConfigDict


class BadRequestResponse(BaseModel):
    message: str


class ConflictResponse(BaseModel):
    message: str


class ValidationErrorResponseDetail(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "message": "Validation error on request data (Pydantic validation).",
                "errors": [
                    {
                        "field": "quantity",
                        "message": "Input should be a valid integer",
                    },
                ],
            }
        },
    )

    message: str
    errors: list[ValidationErrorResponseDetail]


class InternalServerErrorResponse(BaseModel):
    detail: str


COMMON_ERROR_RESPONSES = {
    "400": {"model": BadRequestResponse},
    "422": {"model": ValidationErrorResponse},
    "500": {"model": InternalServerErrorResponse},
}
