from pydantic import BaseModel, ConfigDict


def split_terms(raw: str) -> list[str]:
    """Whitespace tokens of ``raw``, longest first.

    Longer terms must come first so a term that is a substring of another
    ("lap" vs "laptop") cannot claim the shorter match first.
    """
    terms = [t for t in raw.split() if t]
    # sorted() is stable, so equal-length terms keep their input order.
    return sorted(terms, key=len, reverse=True)


class Query(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: str

    @property
    def text(self) -> str:
        return self.raw.strip()

    @property
    def is_blank(self) -> bool:
        return not self.text

    @property
    def terms(self) -> list[str]:
        return split_terms(self.raw)
