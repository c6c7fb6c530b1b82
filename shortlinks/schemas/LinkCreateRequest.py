from pydantic import BaseModel, Field

# Request DTOs
class LinkCreateRequest(BaseModel):
    # target is the Python field, 'url' is the JSON key.
    # Kept as a plain string so an empty value reaches the store and maps to 400.
    target: str = Field("", alias="url")

    model_config = {"populate_by_name": True}
