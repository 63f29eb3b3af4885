import logging
from typing import Any, Protocol

from sqlalchemy import or_, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.exceptions import QueryRejected, SourceUnavailable
from app.models.article import Article
from app.models.product import Product
from app.utils.query import Query

logger = logging.getLogger("app.sources")

SourceRecord = dict[str, Any]


class SourceExecutor(Protocol):
    """
    One searchable data source.

    ``execute`` may be a plain or a coroutine function; it returns raw
    records in the source's own field names, optionally with a numeric
    ``score``.
    """

    source_type: str

    def execute(self, query: Query) -> list[SourceRecord]:
        ...


class SqlSource:
    """
    Base for sources stored in SQLite tables with an FTS5 shadow table.

    Subclasses declare the model, the fields matched against the query and
    the fields copied into each record.
    """

    source_type: str
    model: type
    fts_table: str
    match_fields: tuple[str, ...]
    record_fields: tuple[str, ...]

    def __init__(self, session_factory: sessionmaker, match_mode: str = "substring"):
        if match_mode not in ("substring", "fulltext"):
            raise ValueError(f"Unknown match mode: {match_mode}")
        self._session_factory = session_factory
        self.match_mode = match_mode

    def execute(self, query: Query) -> list[SourceRecord]:
        try:
            with self._session_factory() as db:
                if self.match_mode == "fulltext":
                    records = self._fulltext(db, query)
                else:
                    records = self._substring(db, query)
        except OperationalError as exc:
            if self.match_mode == "fulltext" and "fts5: syntax error" in str(exc):
                raise QueryRejected(self.source_type) from exc
            raise SourceUnavailable(self.source_type, str(exc.orig or exc)) from exc
        except SQLAlchemyError as exc:
            raise SourceUnavailable(self.source_type, str(exc)) from exc

        logger.debug("%s: %d %s matches for %r", self.source_type, len(records), self.match_mode, query.text)
        return records

    def to_record(self, row, score: float | None = None) -> SourceRecord:
        record = {"id": row.id}
        for field in self.record_fields:
            record[field] = getattr(row, field)
        if score is not None:
            record["score"] = score
        return record

    def _substring(self, db: Session, query: Query) -> list[SourceRecord]:
        columns = [getattr(self.model, f) for f in self.match_fields]
        rows = (
            db.query(self.model)
            .filter(or_(*(c.icontains(query.text, autoescape=True) for c in columns)))
            .all()
        )
        return [self.to_record(r) for r in rows]

    def _fulltext(self, db: Session, query: Query) -> list[SourceRecord]:
        # Quoted terms are matched as literal words; any term may match.
        match = " OR ".join('"{}"'.format(t.replace('"', '""')) for t in query.terms)
        hits = db.execute(
            text(
                f"""
                SELECT t.id AS id, -{self.fts_table}.rank AS score
                FROM {self.fts_table}
                JOIN {self.model.__tablename__} t ON t.rowid = {self.fts_table}.rowid
                WHERE {self.fts_table} MATCH :match
                ORDER BY {self.fts_table}.rank
                """
            ),
            {"match": match},
        ).all()
        if not hits:
            return []

        rows = db.query(self.model).filter(self.model.id.in_([h.id for h in hits])).all()
        by_id = {r.id: r for r in rows}
        return [self.to_record(by_id[h.id], h.score) for h in hits if h.id in by_id]


class ProductSource(SqlSource):
    source_type = "product"
    model = Product
    fts_table = "products_fts"
    match_fields = ("name", "description", "category")
    record_fields = ("name", "description", "category", "price")


class ArticleSource(SqlSource):
    source_type = "article"
    model = Article
    fts_table = "articles_fts"
    match_fields = ("title", "content", "author")
    record_fields = ("title", "content", "author", "tags")


def build_sources(session_factory: sessionmaker, match_mode: str = "substring") -> list[SqlSource]:
    """Registered sources in tie-break order: products first, then articles."""
    return [
        ProductSource(session_factory, match_mode),
        ArticleSource(session_factory, match_mode),
    ]
