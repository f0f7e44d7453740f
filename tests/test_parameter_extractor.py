import textwrap

from routenote.extractors.spring.params import (
    extract_path_variables,
    extract_query_parameters,
    extract_signature_span,
)


def test_path_variable_alias_and_identifier():
    span = (
        'public String get(@PathVariable("userId") Long id, '
        '@PathVariable(name = "c") java.util.UUID commentId, '
        "@PathVariable String slug) {"
    )
    pvs = extract_path_variables(span)
    assert [(p.name, p.declared_type) for p in pvs] == [
        ("userId", "Long"),
        ("c", "java.util.UUID"),
        ("slug", "String"),
    ]


def test_path_variable_with_required_flag_uses_identifier():
    pvs = extract_path_variables("x(@PathVariable(required = false) final Integer id) {")
    assert [(p.name, p.declared_type) for p in pvs] == [("id", "Integer")]


def test_query_parameters_alias_precedence():
    span = (
        'x(@RequestParam("q") String search, '
        "@RequestParam Integer page, "
        '@RequestParam(value = "v", name = "n") Boolean flag, '
        '@RequestParam(value = "size") int limit) {'
    )
    query = extract_query_parameters(span)
    assert {k: v.declared_type for k, v in query.items()} == {
        "q": "String",
        "page": "Integer",
        "n": "Boolean",
        "size": "int",
    }


def test_query_parameters_skip_nested_annotations_and_default_value():
    span = 'x(@RequestParam(defaultValue = "1") @Min(1) @Valid final Integer page) {'
    query = extract_query_parameters(span)
    assert list(query) == ["page"]
    assert query["page"].declared_type == "Integer"


def test_query_parameters_last_duplicate_wins():
    span = 'x(@RequestParam("q") String a, @RequestParam("q") Double b) {'
    query = extract_query_parameters(span)
    assert list(query) == ["q"]
    assert query["q"].declared_type == "Double"


def test_generic_types_are_captured():
    query = extract_query_parameters("x(@RequestParam List<String> tags) {")
    assert query["tags"].declared_type == "List<String>"


def test_no_parameters():
    assert extract_path_variables("public String home() {") == []
    assert extract_query_parameters("public String home() {") == {}


def test_signature_span_stops_at_brace_after_modifier():
    lines = textwrap.dedent(
        """\
        @GetMapping("/x/{id}")
        public ResponseEntity<String> get(
                @PathVariable Long id,
                @RequestParam String q) {
            return helper(@RequestParam String ignored);
        }
        """
    ).splitlines()

    span = extract_signature_span(lines, 0)
    assert span.splitlines() == lines[:4]
    assert list(extract_query_parameters(span)) == ["q"]


def test_signature_span_runs_to_end_without_modifier():
    lines = ['@GetMapping("/x")', "String get() {", "}"]
    assert extract_signature_span(lines, 0) == "\n".join(lines)


def test_signature_span_ignores_modifier_words_inside_mapping_path():
    for path in ("/public/{id}", "/private/{id}", "/protected/{id}"):
        lines = [
            f'@GetMapping("{path}")',
            "public String get(",
            "        @PathVariable Long id) {",
            "    return \"{}\";",
            "}",
        ]
        span = extract_signature_span(lines, 0)
        assert span.splitlines() == lines[:3]
        assert [(pv.name, pv.declared_type) for pv in extract_path_variables(span)] == [("id", "Long")]
