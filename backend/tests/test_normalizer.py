from app.services.normalizer import SOURCE_FIELD_MAPS, UNTITLED, normalize


class TestNormalizer:
    def test_product_fields(self):
        record = {"id": "p1", "name": "Pro Laptop Stand", "description": "Aluminium", "category": "Accessories", "price": 1200}
        result = normalize(record, "product")
        assert result.id == "p1"
        assert result.source_type == "product"
        assert result.title == "Pro Laptop Stand"
        assert result.description == "Aluminium"
        assert result.metadata == {"category": "Accessories", "price": 1200}

    def test_article_fields(self):
        record = {"id": 7, "title": "Text Indexes", "content": "In depth", "author": "Sneha", "tags": ["db"]}
        result = normalize(record, "article")
        assert result.id == "7"
        assert result.title == "Text Indexes"
        assert result.description == "In depth"
        assert result.metadata == {"author": "Sneha", "tags": ["db"]}

    def test_missing_score_defaults_to_zero(self):
        assert normalize({"id": "a", "name": "x"}, "product").relevance_score == 0.0
        assert normalize({"id": "a", "name": "x", "score": None}, "product").relevance_score == 0.0

    def test_score_copied_as_is(self):
        assert normalize({"id": "a", "title": "x", "score": 1.5}, "article").relevance_score == 1.5
        assert normalize({"id": "a", "title": "x", "score": 3}, "article").relevance_score == 3.0

    def test_non_numeric_score_ignored(self):
        for score in ("1.5", True, float("nan")):
            assert normalize({"id": "a", "score": score}, "product").relevance_score == 0.0

    def test_infinite_score_ignored(self):
        for score in (float("inf"), float("-inf")):
            result = normalize({"id": "a", "title": "x", "score": score}, "article")
            assert result.relevance_score == 0.0
            assert '"relevance_score":0.0' in result.model_dump_json()

    def test_title_falls_back_through_candidates(self):
        assert normalize({"id": "a", "name": "", "title": "Alt"}, "product").title == "Alt"
        assert normalize({"id": "a", "name": "", "title": None}, "product").title == UNTITLED
        assert normalize({"id": "a"}, "article").title == UNTITLED

    def test_description_falls_back_to_empty(self):
        assert normalize({"id": "a", "name": "x"}, "product").description == ""
        assert normalize({"id": "a", "title": "x", "description": "alt"}, "article").description == "alt"

    def test_unknown_source_uses_generic_mapping(self):
        result = normalize({"id": "n1", "name": "Note", "content": "Body"}, "note")
        assert result.source_type == "note"
        assert result.title == "Note"
        assert result.description == "Body"
        assert result.metadata == {}

    def test_input_not_mutated(self):
        record = {"id": "a", "name": "x", "tags": ["t"], "score": 2}
        snapshot = {"id": "a", "name": "x", "tags": ["t"], "score": 2}
        normalize(record, "product")
        assert record == snapshot

    def test_every_source_declares_title_and_description(self):
        for mapping in SOURCE_FIELD_MAPS.values():
            assert mapping.title
            assert mapping.description
