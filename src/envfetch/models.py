"""Data models shared by the commands and the interactive editor."""

from pydantic import BaseModel, ConfigDict, Field


class Variable(BaseModel):
    """A single environment variable."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Variable name")
    value: str = Field(description="Variable value")


# Immutable copy of the variable set taken at one instant.
VariableSnapshot = tuple[Variable, ...]
