import textwrap

from routenote.compose.edits import is_generated_comment, plan_document, stale_comment_lines
from routenote.domain.models import DeleteLines, InsertLine
from routenote.host.document import TextDocument, application_order

BASE_URL = "https://localhost:8080"


def src(s: str) -> str:
    return textwrap.dedent(s)


def apply(text: str) -> str:
    doc = TextDocument(text)
    plan = plan_document(doc, BASE_URL)
    assert doc.apply_edits(application_order(plan.operations))
    return doc.render()


def test_plan_replaces_stale_comment():
    text = src(
        """\
        @RestController
        public class A {
            // GET https://localhost:8080/users/{id:int}
            @GetMapping("/users/{id}")
            public String get(@PathVariable java.util.UUID id) {
                return "";
            }
        }
        """
    )
    plan = plan_document(TextDocument(text), BASE_URL)

    assert set(plan.operations) == {
        DeleteLines(start=2, end=2),
        InsertLine(line=3, text="    // GET https://localhost:8080/users/{id:uuid}", seq=0),
    }
    assert plan.endpoint_count == 1
    assert plan.deleted_lines == 1
    assert plan.inserted_lines == 1


def test_block_per_verb_and_path_with_original_indent():
    text = src(
        """\
        @RestController
        @RequestMapping("/api")
        public class A {
        \t@RequestMapping(value = {"/a", "/b"}, method = {RequestMethod.GET, RequestMethod.POST})
        \tpublic String x() { return ""; }
        }
        """
    )
    out = apply(text).splitlines()
    assert out[3:7] == [
        "\t// GET https://localhost:8080/api/a",
        "\t// GET https://localhost:8080/api/b",
        "\t// POST https://localhost:8080/api/a",
        "\t// POST https://localhost:8080/api/b",
    ]
    assert out[7].startswith("\t@RequestMapping(")


def test_user_comments_are_never_deleted():
    text = src(
        """\
        public class A {
            // fetch a user
            // GET https://localhost:8080/old
            @GetMapping("/u")
            public String u() { return ""; }

            // GET rid of this once v2 ships
            // TODO keep me
            @GetMapping("/v")
            public String v() { return ""; }
        }
        """
    )
    lines = text.splitlines()
    assert stale_comment_lines(lines, 3) == [2]
    assert stale_comment_lines(lines, 8) == []

    out = apply(text)
    assert "    // fetch a user\n    // GET https://localhost:8080/u\n    @GetMapping" in out
    assert "https://localhost:8080/old" not in out
    assert "    // TODO keep me\n    // GET https://localhost:8080/v\n" in out


def test_user_patch_note_survives_next_to_generated_patch_line():
    text = src(
        """\
        public class A {
            // PATCH this when v2 lands
            @GetMapping("/x")
            public String x() { return ""; }

            // PATCH https://localhost:8080/old
            @RequestMapping(value = "/y", method = RequestMethod.PATCH)
            public String y() { return ""; }
        }
        """
    )
    lines = text.splitlines()
    assert stale_comment_lines(lines, 2, BASE_URL) == []
    assert stale_comment_lines(lines, 6, BASE_URL) == [5]

    out = apply(text)
    assert "    // PATCH this when v2 lands\n    // GET https://localhost:8080/x\n" in out
    assert "https://localhost:8080/old" not in out
    assert "    // PATCH https://localhost:8080/y\n    @RequestMapping(" in out


def test_generated_prefix_detection():
    assert is_generated_comment("    // REQUEST https://h/x")
    assert is_generated_comment("// PATCH https://h/x", "https://h/")
    assert is_generated_comment("// HEAD https://h", "https://h")
    assert not is_generated_comment("// PATCH https://h/x")
    assert not is_generated_comment("// PATCH this when v2 lands", "https://h")
    assert not is_generated_comment("// OPTIONS https://other/x", "https://h")
    assert not is_generated_comment("// GET")
    assert not is_generated_comment("//GET https://h")
    assert not is_generated_comment("// get https://h")


def test_modifier_word_in_path_does_not_cut_signature_short():
    text = src(
        """\
        public class A {
            @GetMapping("/public/{id}")
            public String get(
                    @PathVariable Long id) {
                return "";
            }
        }
        """
    )
    assert "    // GET https://localhost:8080/public/{id:int}\n    @GetMapping" in apply(text)


def test_two_annotations_on_one_line_keep_source_order():
    text = src(
        """\
        public class A {
            @GetMapping("/a") @PostMapping("/b")
            public String x() { return ""; }
        }
        """
    )
    out = apply(text).splitlines()
    assert out[1:3] == [
        "    // GET https://localhost:8080/a",
        "    // POST https://localhost:8080/b",
    ]
    assert apply(apply(text)) == apply(text)


def test_no_annotations_no_operations():
    plan = plan_document(TextDocument("public class A { }\n"), BASE_URL)
    assert plan.operations == ()
    assert plan.annotations == ()
