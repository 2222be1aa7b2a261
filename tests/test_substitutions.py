from mdtex.core.document import (
    Alignment,
    CodeBlock,
    DirectImage,
    DirectLink,
    Heading,
    InlineCode,
    LatexBlock,
    ListBlock,
    ListKind,
    Literal,
    Paragraph,
    TableBlock,
)
from mdtex.core.substitutions import SubstitutionContext, apply_substitutions


def _symbols(name: str) -> tuple[str, str] | None:
    if name == "List.map":
        return "List.map", "https://docs.example.org/list.html#map"
    return None


def test_placeholders_are_replaced_in_text_and_code() -> None:
    context = SubstitutionContext(substitutions=(("{{ver}}", "1.2"),))
    blocks = (
        Heading(1, (Literal("Release {{ver}}"),)),
        CodeBlock("version = \"{{ver}}\"", "python"),
        LatexBlock("verbatim", ("{{ver}}",)),
    )

    heading, code, latex = apply_substitutions(context, blocks)

    assert heading.body == (Literal("Release 1.2"),)
    assert code.code == "version = \"1.2\""
    assert latex.lines == ("1.2",)


def test_substitutions_apply_in_order() -> None:
    context = SubstitutionContext(substitutions=(("{{a}}", "{{b}}"), ("{{b}}", "done")))
    (paragraph,) = apply_substitutions(context, (Paragraph((Literal("{{a}}"),)),))
    assert paragraph.body == (Literal("done"),)


def test_code_reference_becomes_link() -> None:
    context = SubstitutionContext(code_reference_resolver=_symbols)
    (paragraph,) = apply_substitutions(context, (Paragraph((InlineCode("cref:List.map"),)),))
    assert paragraph.body == (
        DirectLink((InlineCode("List.map"),), "https://docs.example.org/list.html#map"),
    )


def test_unknown_code_reference_is_kept() -> None:
    context = SubstitutionContext(code_reference_resolver=_symbols)
    (paragraph,) = apply_substitutions(context, (Paragraph((InlineCode("cref:Nope"),)),))
    assert paragraph.body == (InlineCode("cref:Nope"),)


def test_link_resolver_rewrites_document_links() -> None:
    def resolve(link: str) -> str | None:
        return link.replace(".md", ".html") if link.endswith(".md") else None

    context = SubstitutionContext(link_resolver=resolve)
    blocks = (
        Paragraph(
            (
                DirectLink((Literal("guide"),), "guide.md"),
                DirectLink((Literal("site"),), "https://example.org"),
                DirectImage("", "chart.md"),
            )
        ),
    )

    (paragraph,) = apply_substitutions(context, blocks)

    assert paragraph.body[0].link == "guide.html"
    assert paragraph.body[1].link == "https://example.org"
    assert paragraph.body[2].link == "chart.html"


def test_nested_lists_and_tables_are_visited() -> None:
    context = SubstitutionContext(substitutions=(("$NAME", "mdtex"),))
    cell = (Paragraph((Literal("$NAME"),)),)
    blocks = (
        ListBlock(ListKind.UNORDERED, ((Paragraph((Literal("use $NAME"),)),),)),
        TableBlock(headers=(cell,), alignments=(Alignment.LEFT,), rows=((cell,),)),
    )

    items, table = apply_substitutions(context, blocks)

    assert items.items[0][0].body == (Literal("use mdtex"),)
    assert table.headers[0][0].body == (Literal("mdtex"),)
    assert table.rows[0][0][0].body == (Literal("mdtex"),)


def test_input_tree_is_not_modified() -> None:
    original = (Paragraph((Literal("{{x}}"),)),)
    apply_substitutions(SubstitutionContext(substitutions=(("{{x}}", "y"),)), original)
    assert original[0].body == (Literal("{{x}}"),)
