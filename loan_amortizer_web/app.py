import logging
import os

from flask import Flask, jsonify, render_template, request

from loan_amortizer.engine import compute_schedule
from loan_amortizer.errors import LoanCalculatorError
from loan_amortizer.main import build_parameters_from_options
from loan_amortizer.summary import (
    cumulative_totals,
    emi_breakdown,
    payment_breakdown,
    schedule_to_dicts,
    summarize_schedule,
    summary_to_dict,
)
from loan_amortizer.utils import parse_amount, parse_int, parse_percent


def _log_level(name) -> int:
    """Map a level name to a logging level, falling back to INFO."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _env_int(name: str, default: int) -> int:
    """Read a whole number from the environment, falling back to ``default``."""
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


logging.basicConfig(level=_log_level(os.environ.get("LOAN_AMORTIZER_LOG_LEVEL", "INFO")))
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.config["PREVIEW_ROWS"] = _env_int("LOAN_AMORTIZER_PREVIEW_ROWS", 120)
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")


def parse_form_list(value: str) -> list[str]:
    """Parse a comma or newline separated list of entries from a form field.

    Returns a list of trimmed strings, skipping any empty entries.
    """
    if not value:
        return []
    parts = [p.strip() for p in value.replace("\n", ",").split(",")]
    return [p for p in parts if p]


def _form_to_parameters(form):
    mode = form.get("mode", "installment")
    return build_parameters_from_options(
        principal=form.get("principal", "").strip(),
        start_date=form.get("start_date", "").strip(),
        installment=(form.get("installment", "").strip() or None) if mode == "installment" else None,
        tenure=(form.get("tenure", "").strip() or None) if mode == "tenure" else None,
        rate=tuple(parse_form_list(form.get("rates", ""))),
        extra=tuple(parse_form_list(form.get("extras", ""))),
        default_extra=form.get("default_extra", "").strip() or None,
        extra_interval=form.get("extra_interval", "").strip() or None,
    )


def _cumulative_for_chart(schedule):
    return [
        {
            "month": point.month,
            "date": point.payment_date.isoformat(),
            "cumulative_interest": float(point.cumulative_interest),
            "cumulative_principal": float(point.cumulative_principal),
            "balance": float(point.closing_balance),
        }
        for point in cumulative_totals(schedule)
    ]


def _run_analysis(form, show_full_schedule: bool):
    params = _form_to_parameters(form)
    schedule = compute_schedule(params)
    summary = summarize_schedule(schedule)
    preview_rows = app.config["PREVIEW_ROWS"]
    if show_full_schedule or len(schedule) <= preview_rows:
        return summary, schedule, 0
    return summary, schedule[:preview_rows], len(schedule) - preview_rows


@app.route("/", methods=["GET", "POST"])
def index():
    summary = None
    breakdown = None
    schedule = None
    truncated = 0
    error = None
    show_full_schedule = False

    if request.method == "POST":
        show_full_schedule = request.form.get("show_full_schedule") == "1"
        try:
            summary, schedule, truncated = _run_analysis(request.form, show_full_schedule)
            breakdown = payment_breakdown(summary)
        except LoanCalculatorError as exc:
            logger.info("Rejected loan form: %s", exc)
            error = str(exc)

    return render_template(
        "index.html",
        form=request.form,
        summary=summary,
        breakdown=breakdown,
        schedule=schedule,
        truncated=truncated,
        show_full_schedule=show_full_schedule,
        error=error,
        emi=None,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.post("/emi")
def emi():
    result = None
    error = None
    try:
        result = emi_breakdown(
            parse_amount(request.form.get("emi_principal", "")),
            parse_percent(request.form.get("emi_rate", "")),
            parse_int(request.form.get("emi_tenure", ""), "Tenure"),
        )
    except LoanCalculatorError as exc:
        logger.info("Rejected EMI form: %s", exc)
        error = str(exc)
    return render_template(
        "index.html",
        form=request.form,
        summary=None,
        breakdown=None,
        schedule=None,
        truncated=0,
        show_full_schedule=False,
        error=error,
        emi=result,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.get("/api/schedule")
def api_schedule():
    """Return the schedule, summary and chart series as JSON."""
    try:
        params = _form_to_parameters(request.args)
    except LoanCalculatorError as exc:
        return jsonify({"error": str(exc)}), 400
    schedule = compute_schedule(params)
    summary = summarize_schedule(schedule)
    breakdown = payment_breakdown(summary)
    return jsonify(
        {
            "summary": summary_to_dict(summary),
            "breakdown": {key: float(value) for key, value in breakdown.items()},
            "schedule": schedule_to_dicts(schedule),
            "cumulative": _cumulative_for_chart(schedule),
        }
    )


if __name__ == "__main__":
    print("Starting Loan Amortizer web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
