from pydantic import BaseModel, ConfigDict

class Story(BaseModel):
    """One Hacker News story; position in the fetched list is its 1-based index."""
    model_config = ConfigDict(frozen=True)

    title: str
    link: str
