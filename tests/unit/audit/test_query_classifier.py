"""Tests for QueryClassifier request building and response mapping."""

from __future__ import annotations

import json

import pytest

from funcaudit.audit.classifier import SYSTEM_INSTRUCTION, QueryClassifier
from funcaudit.core.exceptions import ClassifierError, EmptyQueryError, ModelProviderError
from funcaudit.models.function_entry import FunctionEntry
from tests.fakes import FailingModelProvider, MockModelProvider

DOUYIN_SCAN = FunctionEntry(
    id="dy-scan",
    app_name="抖音",
    function_name="扫一扫",
    path="打开抖音-首页-左上角更多-扫一扫",
    landing_page="snssdk1128://qrcode",
    example_queries=["打开抖音扫一扫"],
)


def _payload(**fields) -> str:
    return json.dumps(fields, ensure_ascii=False)


@pytest.fixture
def model():
    return MockModelProvider()


@pytest.fixture
def classifier(model):
    return QueryClassifier(model)


class TestBuildRequest:
    def test_condensed_catalog_omits_path_and_landing_page(self, classifier):
        request = classifier.build_request("q", [DOUYIN_SCAN])
        assert request.catalog[0].model_dump() == {
            "id": "dy-scan", "app": "抖音", "func": "扫一扫", "queries": ["打开抖音扫一扫"],
        }

    def test_catalog_truncated_to_cap_in_order(self, model):
        catalog = [FunctionEntry(id=str(i), app_name="A", function_name=f"f{i}") for i in range(150)]
        request = QueryClassifier(model).build_request("q", catalog)
        assert len(request.catalog) == 100
        assert request.catalog[0].id == "0"
        assert request.catalog[-1].id == "99"

    def test_custom_cap(self, model):
        catalog = [FunctionEntry(id=str(i), app_name="A", function_name="f") for i in range(5)]
        assert len(QueryClassifier(model, catalog_cap=2).build_request("q", catalog).catalog) == 2

    def test_system_instruction_names_criteria(self, classifier):
        request = classifier.build_request("q", [])
        for criterion in ("Semantic Similarity", "App Context", "Specificity"):
            assert criterion in request.system_instruction

    def test_messages_embed_query_and_catalog(self, classifier, model):
        model.queue_response(_payload(isDefined=False, matchScore=0.1, reasoning="r"))
        classifier.classify("使用抖音扫一扫", [DOUYIN_SCAN])
        system, user = model.calls[0]
        assert system == {"role": "system", "content": SYSTEM_INSTRUCTION}
        assert '"使用抖音扫一扫"' in user["content"]
        assert '"dy-scan"' in user["content"]
        assert "snssdk1128" not in user["content"]


class TestClassify:
    def test_resolves_matched_function(self, classifier, model):
        model.queue_response(_payload(isDefined=True, matchScore=0.93, matchedFunctionId="dy-scan", reasoning="同一功能"))
        result = classifier.classify("使用抖音扫一扫", [DOUYIN_SCAN])
        assert result.is_defined is True
        assert result.match_score == pytest.approx(0.93)
        assert result.matched_function == DOUYIN_SCAN
        assert result.reasoning == "同一功能"

    def test_unknown_id_leaves_match_absent(self, classifier, model):
        model.queue_response(_payload(isDefined=True, matchScore=0.7, matchedFunctionId="stale", reasoning="r"))
        result = classifier.classify("q", [DOUYIN_SCAN])
        assert result.is_defined is True
        assert result.match_score == pytest.approx(0.7)
        assert result.matched_function is None

    def test_defined_without_id_accepted(self, classifier, model):
        model.queue_response(_payload(isDefined=True, matchScore=0.6, reasoning="r"))
        result = classifier.classify("q", [DOUYIN_SCAN])
        assert result.is_defined is True
        assert result.matched_function is None

    def test_id_ignored_when_not_defined(self, classifier, model):
        model.queue_response(_payload(isDefined=False, matchScore=0.2, matchedFunctionId="dy-scan",
                                      reasoning="r", suggestedImprovement="新增功能"))
        result = classifier.classify("q", [DOUYIN_SCAN])
        assert result.matched_function is None
        assert result.suggested_improvement == "新增功能"

    def test_id_resolved_against_full_catalog_beyond_cap(self, model):
        catalog = [FunctionEntry(id=str(i), app_name="A", function_name=f"f{i}") for i in range(3)]
        model.queue_response(_payload(isDefined=True, matchScore=0.9, matchedFunctionId="2", reasoning="r"))
        result = QueryClassifier(model, catalog_cap=1).classify("q", catalog)
        assert result.matched_function == catalog[2]

    def test_out_of_range_score_clamped(self, classifier, model):
        model.queue_response(_payload(isDefined=False, matchScore=1.7, reasoning="r"))
        assert classifier.classify("q", []).match_score == 1.0

    @pytest.mark.parametrize("score", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_score_raises(self, classifier, model, score):
        model.queue_response('{"isDefined": false, "matchScore": ' + score + ', "reasoning": "r"}')
        with pytest.raises(ClassifierError, match="matchScore") as exc_info:
            classifier.classify("q", [])
        assert exc_info.value.query == "q"

    @pytest.mark.parametrize("missing", ["isDefined", "matchScore", "reasoning"])
    def test_missing_required_field_raises(self, classifier, model, missing):
        fields = {"isDefined": False, "matchScore": 0.1, "reasoning": "r"}
        del fields[missing]
        model.queue_response(_payload(**fields))
        with pytest.raises(ClassifierError) as exc_info:
            classifier.classify("q", [])
        assert missing in str(exc_info.value)
        assert exc_info.value.query == "q"

    @pytest.mark.parametrize("text", ["not json", "", "[1, 2]"])
    def test_invalid_payload_raises(self, classifier, model, text):
        model.queue_response(text)
        with pytest.raises(ClassifierError):
            classifier.classify("q", [])

    def test_provider_failure_wrapped(self):
        classifier = QueryClassifier(FailingModelProvider("timeout"))
        with pytest.raises(ClassifierError) as exc_info:
            classifier.classify("q", [])
        assert isinstance(exc_info.value.__cause__, ModelProviderError)

    def test_blank_query_rejected_before_call(self, classifier, model):
        with pytest.raises(EmptyQueryError):
            classifier.classify("   ", [DOUYIN_SCAN])
        assert model.calls == []
