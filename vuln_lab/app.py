"""ReflectLab: deliberately reflecting web server for ReflectScan testing.

Every endpoint echoes some of its inputs back into the page, raw or
escaped, from the query string, a form body or a JSON body, so scans in
all three request modes (GET, POST/PATCH form, POST/PATCH json) have
something to find.
"""

from html import escape

from flask import Flask, request, render_template_string, jsonify

app = Flask(__name__)

API_KEY = "reflectlab"


# ── Shared HTML layout ──────────────────────────────────────────

_LAYOUT = """<!DOCTYPE html>
<html><head><title>ReflectLab — {{ title }}</title>
<style>
body{font-family:monospace;background:#111;color:#0f0;max-width:900px;margin:0 auto;padding:2rem}
a{color:#0ff}h1{color:#f00}h2{color:#ff0}
.result{background:#1a1a1a;padding:1rem;border:1px solid #333;margin:1rem 0}
</style></head>
<body>
<h1>🔓 ReflectLab</h1>
<p><a href="/">← Home</a></p>
<h2>{{ title }}</h2>
{{ content|safe }}
</body></html>
"""


def page(title, content):
    return render_template_string(_LAYOUT, title=title, content=content)


def inputs():
    """Query string, form body and JSON body merged; body wins."""
    merged = dict(request.args.items())
    merged.update(request.form.items())
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        merged.update({k: str(v) for k, v in data.items()})
    return merged


# ══════════════════════════════════════════════════════════════════
#  HOME
# ══════════════════════════════════════════════════════════════════

@app.route("/")
def home():
    return page("Home", """
    <p>Deliberately reflecting application for ReflectScan testing.</p>
    <ul>
        <li><a href="/search?q=test&page=2">Raw reflection</a></li>
        <li><a href="/escaped?q=test">HTML-escaped reflection</a></li>
        <li><a href="/profile?name=alice&bio=hello">Profile (POST/PATCH, form or JSON)</a></li>
        <li><a href="/private?q=test">Reflection behind X-Api-Key</a></li>
        <li><a href="/plain?q=test">No reflection</a></li>
    </ul>
    """)


# ══════════════════════════════════════════════════════════════════
#  Raw reflection: q is echoed unescaped, page is not echoed
# ══════════════════════════════════════════════════════════════════

@app.route("/search", methods=["GET", "POST", "PATCH"])
def search():
    q = inputs().get("q", "")
    # VULNERABLE: input rendered inside HTML without escaping
    return page("Search", f'<div class="result"><p>Search results for: {q}</p></div>')


# ══════════════════════════════════════════════════════════════════
#  Escaped reflection: plain words reflect, markup does not
# ══════════════════════════════════════════════════════════════════

@app.route("/escaped", methods=["GET", "POST", "PATCH"])
def escaped():
    q = inputs().get("q", "")
    return page("Escaped", f'<div class="result"><p>You searched: {escape(q)}</p></div>')


# ══════════════════════════════════════════════════════════════════
#  Profile: body-only reflection, GET shows a fixed profile
# ══════════════════════════════════════════════════════════════════

@app.route("/profile", methods=["GET", "POST", "PATCH"])
def profile():
    if request.method == "GET":
        return page("Profile", '<div class="result"><p>Nobody here yet.</p></div>')
    data = dict(request.form.items())
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        data.update({k: str(v) for k, v in body.items()})
    if request.is_json:
        return jsonify({"updated": data, "method": request.method})
    return page("Profile", "".join(
        f'<div class="result"><p>{k} = {v}</p></div>' for k, v in data.items()))


# ══════════════════════════════════════════════════════════════════
#  Private: reflects only with the right X-Api-Key header
# ══════════════════════════════════════════════════════════════════

@app.route("/private", methods=["GET", "POST", "PATCH"])
def private():
    if request.headers.get("X-Api-Key") != API_KEY:
        return page("Forbidden", "<p>Missing or wrong X-Api-Key.</p>"), 401
    q = inputs().get("q", "")
    return page("Private", f'<div class="result"><p>Private results for: {q}</p></div>')


# ══════════════════════════════════════════════════════════════════
#  Plain: never reflects
# ══════════════════════════════════════════════════════════════════

@app.route("/plain", methods=["GET", "POST", "PATCH"])
def plain():
    return page("Plain", '<div class="result"><p>Nothing to see.</p></div>')


# ══════════════════════════════════════════════════════════════════
#  Main
# ══════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    print("\n  🔓 ReflectLab starting on http://0.0.0.0:5000\n")
    app.run(host="0.0.0.0", port=5000, debug=True)
