"""
Flask web application for the finance calculator suite.

Single-file app using render_template_string.  Run via ``python main.py``
which starts the dev server on localhost:5000.
"""

from __future__ import annotations

import io
import logging
from typing import Any, Dict, Optional

from flask import Flask, abort, jsonify, render_template_string, request, send_file

import report
from normalize import Kind
from registry import (
    FormulaSpec,
    ResultView,
    UnknownCalculatorError,
    evaluate,
    get_spec,
    specs_by_category,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)


# ═══════════════════════════════════════════════════════════════════
# Form parsing
# ═══════════════════════════════════════════════════════════════════

def parse_form(spec: FormulaSpec, form) -> Dict[str, Any]:
    """Collect the raw text for each of the calculator's fields.

    Series fields may be posted either as one separated string or as
    repeated inputs with the same name.
    """
    raw: Dict[str, Any] = {}
    for field in spec.fields:
        if field.kind in (Kind.SERIES, Kind.LABELS):
            items = form.getlist(field.name)
            raw[field.name] = items[0] if len(items) == 1 else items
        else:
            raw[field.name] = form.get(field.name, "")
    return raw


def _lookup(key: str) -> FormulaSpec:
    try:
        return get_spec(key)
    except UnknownCalculatorError:
        logger.warning("Unknown calculator requested: %s", key)
        abort(404)


def _json_value(value: Any) -> Any:
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return value if isinstance(value, int) else float(value)
    return None


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ spec.title if spec else "Finance Calculators" }}</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}
  :root{
    --bg-deep:#050816;
    --bg-surface:rgba(15,23,42,0.55);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(99,102,241,0.1);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --indigo:#818cf8;
    --emerald:#34d399;
    --amber:#fbbf24;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }
  body{
    background:var(--bg-deep);color:var(--text-primary);
    font-family:'Inter',system-ui,-apple-system,sans-serif;line-height:1.6;
  }
  a{color:var(--indigo);text-decoration:none}
  a:hover{text-decoration:underline}
  .container{max-width:1040px;margin:0 auto;padding:2rem 1.5rem}
  .hero{text-align:center;padding:1rem 0 2rem}
  .hero h1{font-size:clamp(1.5rem,4vw,2.3rem);font-weight:800;letter-spacing:-.03em}
  .hero-sub{color:var(--text-secondary);margin-top:.5rem;font-size:.92rem}
  .card{
    background:var(--bg-surface);border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.6rem;margin-bottom:1.3rem;
  }
  h2{font-size:1.1rem;font-weight:700;margin-bottom:1rem}
  .calc-list{list-style:none;columns:2;column-gap:2rem}
  .calc-list li{padding:.2rem 0;break-inside:avoid}
  .form-grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(260px,1fr));gap:1rem 1.5rem}
  .form-group{display:flex;flex-direction:column}
  .form-group label{font-size:.78rem;color:var(--text-secondary);margin-bottom:.3rem;font-weight:500}
  .form-group input,.form-group select,.form-group textarea{
    background:var(--bg-input);border:1px solid rgba(71,85,105,.35);
    border-radius:var(--radius-md);color:var(--text-primary);
    padding:.6rem .85rem;font-size:.88rem;font-family:inherit;
  }
  .form-group.wide{grid-column:1/-1}
  .error{color:var(--red);font-size:.75rem;margin-top:.25rem}
  .actions{margin-top:1.4rem;display:flex;gap:.8rem}
  button{
    background:linear-gradient(135deg,#6366f1,#8b5cf6);color:#fff;border:none;
    border-radius:var(--radius-md);padding:.7rem 1.6rem;font-weight:600;cursor:pointer;
  }
  button.secondary{background:transparent;border:1px solid var(--indigo);color:var(--indigo)}
  table{width:100%;border-collapse:collapse}
  td{padding:.45rem .3rem;border-bottom:1px solid rgba(71,85,105,.2);font-size:.9rem}
  td.val{text-align:right;font-variant-numeric:tabular-nums}
  tr.hl td{color:var(--indigo);font-weight:700;font-size:1rem}
  .badge{display:inline-block;padding:.3rem .9rem;border-radius:100px;font-weight:600;font-size:.85rem;margin-bottom:1rem}
  .badge.healthy{background:rgba(52,211,153,.12);color:var(--emerald)}
  .badge.warning{background:rgba(251,191,36,.12);color:var(--amber)}
  .badge.danger{background:rgba(248,113,113,.12);color:var(--red)}
  .badge.none{background:rgba(148,163,184,.1);color:var(--text-secondary)}
  .formula{font-family:ui-monospace,monospace;color:var(--text-secondary);font-size:.85rem}
  ul.tips{margin-left:1.2rem;color:var(--text-secondary);font-size:.88rem}
  img.chart{width:100%;border-radius:var(--radius-md);margin-top:.5rem}
</style>
</head>
<body>
<div class="container">
{% if not spec %}
  <div class="hero">
    <h1>Finance Calculators</h1>
    <p class="hero-sub">Loans, savings, business ratios, investments and tax in one place.</p>
  </div>
  {% for category, specs in groups %}
  <div class="card">
    <h2>{{ category }}</h2>
    <ul class="calc-list">
      {% for s in specs %}
      <li><a href="{{ url_for('calculator', key=s.key) }}">{{ s.title }}</a></li>
      {% endfor %}
    </ul>
  </div>
  {% endfor %}
{% else %}
  <div class="hero">
    <p><a href="{{ url_for('index') }}">&larr; All calculators</a></p>
    <h1>{{ spec.title }}</h1>
    <p class="hero-sub">{{ spec.summary }}</p>
  </div>

  <form class="card" method="post" action="{{ url_for('calculator', key=spec.key) }}">
    <h2>Inputs</h2>
    <div class="form-grid">
    {% for f in spec.fields %}
      <div class="form-group{% if f.kind.value in ('series', 'labels') %} wide{% endif %}">
        <label for="{{ f.name }}">{{ f.label }}</label>
        {% if f.choices %}
        <select id="{{ f.name }}" name="{{ f.name }}">
          {% if f.default is none %}<option value="">Select&hellip;</option>{% endif %}
          {% for value, text in f.choices %}
          <option value="{{ value }}"
            {% if (form.get(f.name) ~ '') == (value ~ '') or (f.name not in form and value == f.default) %}selected{% endif %}>{{ text }}</option>
          {% endfor %}
        </select>
        {% elif f.kind.value == 'boolean' %}
        <input type="checkbox" id="{{ f.name }}" name="{{ f.name }}" value="on"
          {% if form.get(f.name) or (f.name not in form and f.default) %}checked{% endif %}>
        {% elif f.kind.value in ('series', 'labels') %}
        <textarea id="{{ f.name }}" name="{{ f.name }}" rows="3"
          placeholder="{{ f.placeholder or 'One value per line, or separated by ;' }}">{{ form.get(f.name, '') }}</textarea>
        {% else %}
        <input type="text" id="{{ f.name }}" name="{{ f.name }}" value="{{ form.get(f.name, '') }}"
          placeholder="{{ f.placeholder or (f.default if f.default is not none else '') }}">
        {% endif %}
        {% if errors and errors.get(f.name) %}<span class="error">{{ errors[f.name] }}</span>{% endif %}
      </div>
    {% endfor %}
    </div>
    <div class="actions">
      <button type="submit">Calculate</button>
      {% if view %}
      <button type="submit" class="secondary" formaction="{{ url_for('download_pdf', key=spec.key) }}">Download PDF</button>
      {% endif %}
    </div>
  </form>

  {% if view %}
  <div class="card">
    <h2>Results</h2>
    {% if view.label %}<span class="badge {{ view.flag or 'none' }}">{{ view.label }}</span>{% endif %}
    <table>
    {% for out in spec.outputs %}
      <tr class="{{ 'hl' if out.highlight else '' }}"><td>{{ out.label }}</td><td class="val">{{ view.display[out.name] }}</td></tr>
    {% endfor %}
    </table>
    {% if chart %}<img class="chart" src="data:image/png;base64,{{ chart }}" alt="{{ spec.title }} chart">{% endif %}
  </div>
  {% endif %}

  <div class="card">
    <h2>How it works</h2>
    <p class="formula">{{ spec.formula }}</p>
    {% if spec.tips %}
    <h2 style="margin-top:1.2rem">Tips</h2>
    <ul class="tips">{% for tip in spec.tips %}<li>{{ tip }}</li>{% endfor %}</ul>
    {% endif %}
  </div>
{% endif %}
</div>
</body>
</html>
"""


def _render(spec: Optional[FormulaSpec] = None, form=None, outcome=None, status: int = 200):
    view = outcome if isinstance(outcome, ResultView) else None
    errors = outcome.errors if outcome is not None and not outcome.ok else None
    chart = report.render_chart(spec, view) if view is not None else None
    html = render_template_string(
        HTML_TEMPLATE,
        spec=spec,
        groups=specs_by_category() if spec is None else [],
        form=form or {},
        view=view,
        errors=errors,
        chart=chart,
    )
    return html, status


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

@app.route("/")
def index():
    return _render()


@app.route("/<key>", methods=["GET", "POST"])
def calculator(key: str):
    spec = _lookup(key)
    if request.method == "GET":
        return _render(spec)

    form = request.form.to_dict()
    outcome = evaluate(key, parse_form(spec, request.form))
    return _render(spec, form, outcome, status=200 if outcome.ok else 422)


@app.route("/<key>/report.pdf", methods=["POST"])
def download_pdf(key: str):
    spec = _lookup(key)
    outcome = evaluate(key, parse_form(spec, request.form))
    if not outcome.ok:
        return _render(spec, request.form.to_dict(), outcome, status=422)

    pdf = report.generate_pdf(spec, outcome)
    return send_file(
        io.BytesIO(pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"{key}_report.pdf",
    )


@app.route("/api/<key>", methods=["POST"])
def api(key: str):
    try:
        spec = get_spec(key)
    except UnknownCalculatorError:
        logger.warning("Unknown calculator requested: %s", key)
        return jsonify({"error": f"Unknown calculator: {key}"}), 404

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Expected a JSON object of field values."}), 400

    outcome = evaluate(key, payload)
    if not outcome.ok:
        return jsonify({"ok": False, "errors": outcome.errors}), 422
    return jsonify({
        "ok": True,
        "key": key,
        "display": outcome.display,
        "values": {out.name: _json_value(outcome.values.get(out.name)) for out in spec.outputs},
        "label": outcome.label,
        "flag": outcome.flag,
        "note": outcome.note,
    })


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(host: str = "127.0.0.1", port: int = 5000, debug: bool = True) -> None:
    """Start the Flask development server."""
    logger.info("Starting web app at http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_web()
