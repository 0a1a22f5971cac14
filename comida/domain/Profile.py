"""Profile domain entity: a family member whose attributes personalize generation."""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(str, Enum):
    HOMBRE = "Hombre"
    MUJER = "Mujer"
    OTRO = "Otro"


class ActivityLevel(str, Enum):
    BAJO = "Bajo"
    MODERADO = "Moderado"
    ALTO = "Alto"
    MUY_ALTO = "Muy Alto"


class Profile(BaseModel):
    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)

    id: str = ""
    name: str = Field(..., min_length=1)
    age: int = Field(..., gt=0)
    gender: Gender
    activity_level: ActivityLevel = Field(..., alias="activityLevel")
    notes: str = ""

    @field_validator("name", "notes")
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip() if isinstance(v, str) else v

    def summary(self, with_notes: bool = True) -> str:
        '''One-line description used inside generation prompts.'''
        text = f"{self.name} ({self.age} años, {self.gender}, Nivel de actividad: {self.activity_level}"
        if with_notes:
            text += f", Notas: {self.notes or 'ninguna'}"
        return text + ")"

    @staticmethod
    def from_dict(data) -> "Profile":
        return Profile.model_validate(dict(data))

    def to_dict(self) -> dict:
        '''Document body for persistence (the id lives in the document key).'''
        return self.model_dump(exclude={"id"})

    def __str__(self) -> str:
        return self.summary()
