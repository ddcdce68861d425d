"""Learn-hub content models.

ArticleDraft is what the content writer returns (text only). ArticleRecord
adds the image attached in a second pass; every record leaving the pipeline
has one, generated or placeholder.

ArticleSummary is a curated catalogue entry; ArticleContent is the body,
takeaways and image generated for one of them on demand.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
_BULLET_PREFIX = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


def slugify(title: str) -> str:
    """Build a URL-safe id from an article title."""
    return _SLUG_PATTERN.sub("-", title.lower()).strip("-") or "article"


def split_takeaways(v):
    """Accept a Markdown bullet list where a list of strings is expected."""
    if isinstance(v, str):
        lines = (_BULLET_PREFIX.sub("", line).strip() for line in v.splitlines())
        return [line for line in lines if line]
    return v


class ArticleDraft(BaseModel):
    """Article text produced by the content writer.

    Attributes:
        id: Stable slug (derived from the title when the model omits it)
        title: Headline
        author: Byline
        date: Display date, free-form
        summary: One or two sentence teaser
        content: Full body in Markdown
        takeaways: 3-4 short key takeaways
    """

    id: str = Field(default="", description="Slug identifier")
    title: str = Field(min_length=1, description="Headline")
    author: str = Field(default="", description="Byline")
    date: str = Field(default="", description="Display date")
    summary: str = Field(description="Short teaser")
    content: str = Field(description="Markdown body")
    takeaways: list[str] = Field(default_factory=list, description="Key takeaways")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("takeaways", mode="before")
    @classmethod
    def _split_takeaways(cls, v):
        # Models sometimes return a Markdown bullet list instead of an array
        return split_takeaways(v)

    @model_validator(mode="after")
    def _default_id(self) -> "ArticleDraft":
        if not self.id:
            self.id = slugify(self.title)
        return self

    def with_image(self, image: str) -> "ArticleRecord":
        """Attach an image URL, producing the final record."""
        return ArticleRecord(**self.model_dump(), image=image)


class ArticleRecord(ArticleDraft):
    """Article with its image attached."""

    image: str = Field(min_length=1, description="Generated image data URL or placeholder")


class QuestionAnswer(BaseModel):
    """Answer to a user's sustainability question."""

    model_config = ConfigDict(populate_by_name=True)

    answer: str = Field(min_length=1, description="100-150 word answer")
    related_questions: list[str] = Field(
        default_factory=list,
        alias="relatedQuestions",
        description="Suggested follow-up questions",
    )


class ArticleSummary(BaseModel):
    """Catalogue entry for a curated learn-hub article (body generated on demand)."""

    id: str
    title: str
    author: str = ""
    date: str = ""
    summary: str = ""


class ArticleContent(BaseModel):
    """Generated body, takeaways and image for one catalogue article."""

    content: str
    takeaways: list[str] = Field(default_factory=list)
    image: str = Field(min_length=1)

    @field_validator("takeaways", mode="before")
    @classmethod
    def _split_takeaways(cls, v):
        return split_takeaways(v)
