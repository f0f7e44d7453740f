from routenote.compose.url import compose_url
from routenote.domain.models import PathVariableBinding, QueryParameterBinding


def _q(**types):
    return {name: QueryParameterBinding(effective_name=name, declared_type=t) for name, t in types.items()}


def test_typed_placeholders_and_join():
    url = compose_url(
        "https://localhost:8080/",
        "/api/",
        "/users/{id}",
        [PathVariableBinding(name="id", declared_type="Long")],
    )
    assert url == "https://localhost:8080/api/users/{id:int}"


def test_unmatched_placeholder_is_string():
    url = compose_url("https://localhost:8080", "", "/a/{x}/b/{y}", [PathVariableBinding(name="y", declared_type="UUID")])
    assert url == "https://localhost:8080/a/{x:string}/b/{y:uuid}"


def test_regex_placeholder_keeps_name_only():
    url = compose_url("https://h", "", "/n/{id:[0-9]+}", [PathVariableBinding(name="id", declared_type="int")])
    assert url == "https://h/n/{id:int}"


def test_query_string_is_sorted_by_name():
    url = compose_url("https://h", "", "/s", query=_q(z="String", a="Integer", m="boolean"))
    assert url == "https://h/s?a:int&m:bool&z:string"


def test_empty_segments_are_omitted():
    assert compose_url("https://localhost:8080", "", "") == "https://localhost:8080"
    assert compose_url("https://localhost:8080", "/api", "") == "https://localhost:8080/api"
    assert compose_url("https://localhost:8080", "", "/") == "https://localhost:8080"


def test_slash_runs_collapse_but_scheme_survives():
    assert compose_url("http://h:1//ctx//", "//api", "//x//y") == "http://h:1/ctx/api/x/y"


def test_deterministic():
    args = ("https://h", "/api", "/u/{id}", [PathVariableBinding(name="id", declared_type="Long")], _q(b="int", a="int"))
    assert compose_url(*args) == compose_url(*args)
