import json

from mlrest.entities import ExperimentId, PageToken, RunId


def test_identifiers_compare_by_value():
    assert ExperimentId("12") == ExperimentId("12")
    assert ExperimentId("12") != ExperimentId("13")
    assert ExperimentId("12") == "12"
    assert hash(RunId("abc")) == hash("abc")
    assert {RunId("abc"): 1}["abc"] == 1


def test_identifiers_behave_as_strings():
    run_id = RunId("0123456789abcdef")
    assert isinstance(run_id, str)
    assert str(run_id) == "0123456789abcdef"
    assert type(str(run_id)) is str
    assert f"runs/{run_id}" == "runs/0123456789abcdef"
    assert json.dumps({"page_token": PageToken("tok")}) == '{"page_token": "tok"}'


def test_identifier_repr_names_the_type():
    assert repr(ExperimentId("1")) == "ExperimentId('1')"
    assert repr(RunId("r")) == "RunId('r')"
    assert repr(PageToken("p")) == "PageToken('p')"
