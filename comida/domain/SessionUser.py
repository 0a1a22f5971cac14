from pydantic import BaseModel, ConfigDict, Field


class SessionUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., min_length=1)
    display_name: str

    def __str__(self) -> str:
        return self.display_name
