"""
PDF assessment summary rendering (ReportLab platypus).
"""

import io
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, Preformatted, SimpleDocTemplate, Spacer
from reportlab.platypus.flowables import HRFlowable

from codeassess.config import logger

MARGIN = 50
CODE_LINE_LENGTH = 80


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: Any) -> str:
    try:
        return parse_timestamp(value).strftime("%b %d, %Y, %I:%M %p")
    except (TypeError, ValueError):
        return str(value)


def format_duration(seconds: Any) -> str:
    try:
        total = max(0, int(seconds or 0))
    except (TypeError, ValueError):
        total = 0
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}h {minutes}m {secs}s"


def report_filename(end_time: Any) -> str:
    try:
        stamp = parse_timestamp(end_time).strftime("%Y-%m-%d-%H-%M")
    except (TypeError, ValueError):
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d-%H-%M")
    return f"assessment-{stamp}.pdf"


def _styles() -> Dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=styles["Title"],
            fontSize=24,
            spaceAfter=20,
            alignment=1,  # Center
        ),
        "heading": ParagraphStyle(
            "ReportHeading",
            parent=styles["Heading2"],
            fontSize=16,
            spaceBefore=12,
            spaceAfter=8,
        ),
        "problem": ParagraphStyle(
            "ProblemTitle",
            parent=styles["Heading3"],
            fontSize=14,
            spaceBefore=6,
            spaceAfter=6,
        ),
        "label": ParagraphStyle(
            "Label",
            parent=styles["Normal"],
            fontName="Helvetica-Bold",
            fontSize=12,
            leading=16,
            spaceBefore=4,
        ),
        "body": ParagraphStyle(
            "Body",
            parent=styles["Normal"],
            fontSize=12,
            leading=16,
        ),
        "code": ParagraphStyle(
            "CodeBlock",
            parent=styles["Code"],
            fontName="Courier",
            fontSize=10,
            leading=13,
            backColor=colors.HexColor("#f5f5f5"),
            spaceBefore=4,
            spaceAfter=4,
        ),
    }


def _text(value: Any) -> str:
    """Escape user text for a Paragraph, keeping line breaks"""
    return escape(str(value if value is not None else "")).replace("\n", "<br/>")


def _render(story: List[Any], title: str) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=title,
    )
    doc.build(story)
    return buffer.getvalue()


def _problem_state(problem: Dict[str, Any], answers_by_id: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """Per-problem stats, from the embedded state or the matching answer."""
    state = problem.get("state") or {}
    answer = answers_by_id.get(str(problem.get("problem_id")), {})
    return {
        "time_spent": state.get("time_spent", answer.get("time_spent", 0)),
        "has_attempted": state.get("has_attempted", answer.get("has_attempted", bool(answer.get("code")))),
        "has_run": state.get("has_run", answer.get("has_run", False)),
        "code": state.get("code", answer.get("code", "")),
    }


def _metrics(assessment_data: Dict[str, Any], states: List[Dict[str, Any]]) -> Dict[str, int]:
    metrics = assessment_data.get("metrics") or {}
    attempted = sum(1 for s in states if s["has_attempted"])
    return {
        "total_problems": metrics.get("total_problems", len(states)),
        "attempted_count": metrics.get("attempted_count", attempted),
        "skipped_count": metrics.get("skipped_count", len(states) - attempted),
        "ran_code_count": metrics.get("ran_code_count", sum(1 for s in states if s["has_run"])),
    }


def _overall_scores(grading_results: Optional[List[Dict[str, Any]]]) -> Dict[str, Any]:
    scores = {}
    for entry in grading_results or []:
        if not isinstance(entry, dict):
            continue
        grading = entry.get("grading") or {}
        overall = (grading.get("score") or {}).get("overall")
        if overall is not None:
            scores[str(entry.get("problem_id"))] = overall
    return scores


def build_assessment_pdf(assessment_data: Dict[str, Any]) -> bytes:
    problems = [p for p in assessment_data.get("problems") or [] if isinstance(p, dict)]
    answers_by_id = {
        str(a.get("problem_id")): a for a in assessment_data.get("answers") or [] if isinstance(a, dict)
    }
    states = [_problem_state(p, answers_by_id) for p in problems]
    metrics = _metrics(assessment_data, states)
    scores = _overall_scores(assessment_data.get("grading_results"))

    total_time_spent = assessment_data.get("total_time_spent")
    if total_time_spent is None:
        try:
            delta = parse_timestamp(assessment_data["end_time"]) - parse_timestamp(assessment_data["start_time"])
            total_time_spent = int(delta.total_seconds())
        except (KeyError, TypeError, ValueError):
            total_time_spent = 0

    try:
        duration = float(assessment_data.get("duration") or 0)
    except (TypeError, ValueError):
        duration = 0.0

    styles = _styles()
    body = styles["body"]
    story = [Paragraph("Assessment Summary", styles["title"])]

    story.append(Paragraph("Overview", styles["heading"]))
    story.append(Paragraph(f"Start Time: {_text(format_timestamp(assessment_data.get('start_time')))}", body))
    story.append(Paragraph(f"End Time: {_text(format_timestamp(assessment_data.get('end_time')))}", body))
    story.append(Paragraph(f"Duration: {duration:g} hours", body))
    story.append(Paragraph(f"Total Time Spent: {format_duration(total_time_spent)}", body))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Performance Metrics", styles["heading"]))
    story.append(Paragraph(f"Total Problems: {_text(metrics['total_problems'])}", body))
    story.append(Paragraph(f"Problems Attempted: {_text(metrics['attempted_count'])}", body))
    story.append(Paragraph(f"Problems Skipped: {_text(metrics['skipped_count'])}", body))
    story.append(Paragraph(f"Code Execution Attempts: {_text(metrics['ran_code_count'])}", body))
    story.append(Spacer(1, 12))

    story.append(Paragraph("Problems", styles["heading"]))
    for index, (problem, state) in enumerate(zip(problems, states)):
        title = _text(problem.get("title", "Untitled problem"))
        story.append(Paragraph(f"{index + 1}. {title}", styles["problem"]))

        story.append(Paragraph("Description:", styles["label"]))
        story.append(Paragraph(_text(problem.get("description", "")), body))

        story.append(Paragraph("Statistics:", styles["label"]))
        story.append(Paragraph(f"Time Spent: {format_duration(state['time_spent'])}", body))
        story.append(Paragraph(f"Status: {'Attempted' if state['has_attempted'] else 'Not Attempted'}", body))
        story.append(Paragraph(f"Code Runs: {'Yes' if state['has_run'] else 'No'}", body))
        score = scores.get(str(problem.get("problem_id")))
        if score is not None:
            story.append(Paragraph(f"AI Score: {_text(score)}/100", body))

        if state["has_attempted"] and state["code"]:
            story.append(Paragraph("Your Solution:", styles["label"]))
            code = str(state["code"]).expandtabs(4)
            story.append(Preformatted(code, styles["code"], maxLineLength=CODE_LINE_LENGTH))

        if index < len(problems) - 1:
            story.append(HRFlowable(width="100%", thickness=0.75, color=colors.grey, spaceBefore=8, spaceAfter=8))

    data = _render(story, "Assessment Summary")
    logger.info(f"Rendered assessment report: {len(problems)} problems, {len(data)} bytes")
    return data


def build_test_pdf() -> bytes:
    styles = _styles()
    return _render([
        Paragraph("Test PDF", styles["title"]),
        Paragraph("This is a test PDF document.", styles["body"]),
        Paragraph("If you can see this, PDF generation is working correctly.", styles["body"]),
    ], "Test PDF")
