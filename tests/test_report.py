import io

from harvester.core.config import ENTRY_SEPARATOR
from harvester.core.models import (
    Bucket,
    Buckets,
    CommentModel,
    DisplayMode,
    LinkModel,
    Tally,
    TicketModel,
)
from harvester.visual.report import (
    format_run_summary,
    format_ticket,
    render_report,
    section_styles,
)


def _full_ticket(key="FINNA-1", resolution="Fixed", issuetype="Bug"):
    return TicketModel(
        key=key,
        summary="Search results flicker",
        issuetype=issuetype,
        priority="Major",
        resolution=resolution,
        assignee="Alice",
        creator="Carol",
        reporter="Bob",
        created="2024-03-01",
        resolution_date="2024-03-11",
        description="Flicker on reload",
        links=(LinkModel("FINNA-10", "Related work", "Story", "Minor", "Open"),),
        comments=(CommentModel("Dana", "2024-03-02", "Confirmed"),),
    )


def test_section_styles_order_and_modes():
    styles = section_styles()
    assert list(styles) == [Bucket.DONE, Bucket.FIXES, Bucket.NOOP, Bucket.WEIRD]
    assert styles[Bucket.DONE] == ("Parannukset", DisplayMode.FULL_DETAIL)
    assert styles[Bucket.FIXES][1] is DisplayMode.FULL_DETAIL
    assert styles[Bucket.NOOP] == ("Ei tarvitse välittää", DisplayMode.KEY_ONLY)
    assert styles[Bucket.WEIRD] == ("Tarkista nämä!", DisplayMode.KEY_ONLY)


def test_full_entry_layout():
    text = format_ticket(_full_ticket(), DisplayMode.FULL_DETAIL)
    assert text == (
        "FINNA-1       Search results flicker\n"
        "Bug           Major             Fixed\n"
        "2024-03-01    Alice             2024-03-11\n\n"
        "Flicker on reload\n\n"
        "Aiheeseen liittyvät tiketit:\n"
        "\tFINNA-10            Related work\n"
        "\tStory/Minor/Open\n\n"
        "Dana (2024-03-02): Confirmed\n\n"
        f"\n{ENTRY_SEPARATOR}\n\n"
    )


def test_key_only_entry_hides_details():
    text = format_ticket(_full_ticket(resolution="No action required"), DisplayMode.KEY_ONLY)
    assert text == (
        "FINNA-1       Search results flicker\n"
        "Bug           Major             No action required\n"
        f"\n{ENTRY_SEPARATOR}\n\n"
    )
    assert "Flicker on reload" not in text
    assert "Dana" not in text


def test_related_header_only_with_links():
    ticket = TicketModel(key="FINNA-2", summary="No links", description="body")
    text = format_ticket(ticket, DisplayMode.FULL_DETAIL)
    assert "Aiheeseen liittyvät tiketit:" not in text


def test_render_report_sections_and_tally():
    buckets = Buckets()
    buckets.add(Bucket.FIXES, _full_ticket("FINNA-1"))
    buckets.add(Bucket.NOOP, _full_ticket("FINNA-2", resolution="No action required"))
    buckets.add(Bucket.WEIRD, _full_ticket("FINNA-3", resolution="Escalated"))
    sink = io.StringIO()
    tally = render_report(sink, buckets)
    text = sink.getvalue()

    assert "Parannukset" not in text
    assert text.startswith("\n\n\nVikakorjaukset\n\n")
    assert text.index("Vikakorjaukset") < text.index("Ei tarvitse välittää") < text.index("Tarkista nämä!")
    # noop entries are rendered key-only
    noop_part = text[text.index("Ei tarvitse välittää") : text.index("Tarkista nämä!")]
    assert "Flicker on reload" not in noop_part
    assert (tally.done, tally.fixes, tally.noop, tally.total) == (0, 1, 1, 2)
    assert text.endswith(
        "Yhteensä 0 parannusta, 1 vikakorjausta ja 1 tarpeetonta muutospyyntöä, "
        "kaikkiaan 2 kappaletta.\n\n"
    )


def test_render_empty_report():
    sink = io.StringIO()
    tally = render_report(sink, Buckets())
    assert sink.getvalue() == (
        "\n\n\n" * 4
        + "Yhteensä 0 parannusta, 0 vikakorjausta ja 0 tarpeetonta muutospyyntöä, "
        "kaikkiaan 0 kappaletta.\n\n"
    )
    assert format_run_summary(tally) == (
        "Done. 0 improvements, 0 fixes, 0 to be ignored.  0 issues total."
    )


def test_run_summary_excludes_weird():
    assert format_run_summary(Tally(done=2, fixes=3, noop=4)) == (
        "Done. 2 improvements, 3 fixes, 4 to be ignored.  9 issues total."
    )
