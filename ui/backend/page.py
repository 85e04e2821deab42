"""Page shell: header with logo, the report form markup, and footer."""

from __future__ import annotations

from datetime import UTC, datetime
from html import escape

LOGO_SVG = """
<svg class="logo-mark" viewBox="0 0 24 24" width="32" height="32" aria-hidden="true">
  <path d="M14.5 4h-5L7 7H4a2 2 0 0 0-2 2v9a2 2 0 0 0 2 2h16a2 2 0 0 0 2-2V9a2 2 0 0 0-2-2h-3z"
        fill="none" stroke="currentColor" stroke-width="2"/>
  <circle cx="12" cy="13" r="3" fill="none" stroke="currentColor" stroke-width="2"/>
  <line x1="7" y1="13" x2="17" y2="13" stroke="currentColor" stroke-width="1" opacity="0.75"/>
</svg>
""".strip()

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>__TITLE__</title>
</head>
<body>
  <header class="site-header">
    <div class="logo">__LOGO__<span class="logo-text">CityLens</span></div>
  </header>

  <main>
    <section id="upload-card">
      <h2>Report Urban Issue</h2>
      <p>Capture or upload an image of an urban issue, and AI will help describe it.</p>
      <label id="dropzone" for="dropzone-file">
        <strong>Click to upload</strong> or drag and drop
        <small>PNG, JPG, GIF (MAX. 10MB)</small>
        <input id="dropzone-file" type="file" accept="image/*" hidden>
      </label>
      <img id="preview" alt="Preview" hidden>
      <button id="analyze" type="button" hidden>Analyze Image with AI</button>
    </section>

    <div id="analysis-error" role="alert" hidden></div>

    <section id="report-card" hidden>
      <h2>Confirm Report Details</h2>
      <form id="report-form" novalidate>
        <label>Issue Description (AI Generated)
          <textarea name="description" rows="5"></textarea></label>
        <p class="error" data-for="description"></p>
        <label>Photo Location
          <input name="location" placeholder="e.g., Main St &amp; Park Ave, or Lat, Long"></label>
        <button id="locate" type="button" aria-label="Get current location">Locate</button>
        <p class="error" data-for="location"></p>
        <label>To receive updates regarding the issues, please provide your email address
          below (optional) <input name="email" type="email" placeholder="you@example.com"></label>
        <p class="error" data-for="email"></p>
        <label>Additional Comments (Optional) <textarea name="comments"></textarea></label>
        <fieldset>
          <legend>Select Report Recipients *</legend>
          <label><input type="checkbox" name="send_to_local_police"> Local Police</label>
          <p class="error" data-for="send_to_local_police"></p>
          <label><input type="checkbox" name="send_to_city_hall"> City Hall</label>
        </fieldset>
        <button id="submit" type="submit">Send Report</button>
      </form>
    </section>

    <section id="success-card" hidden>
      <h2>Report Sent Successfully!</h2>
      <p>Thank you for your contribution to improving our city. Your report has been recorded.</p>
      <button id="reset" type="button">Submit Another Report</button>
    </section>

    <ul id="toasts" aria-live="polite"></ul>
  </main>

  <footer class="site-footer">
    <p>&copy; __YEAR__ CityLens. Help make your city better.</p>
  </footer>

  <script>
    const $ = (id) => document.getElementById(id);
    const form = $("report-form");
    let draftId = null;

    async function call(path, options = {}) {
      const res = await fetch(`/api/drafts/${draftId}${path}`, options);
      const body = await res.json();
      if (body.draft_id) render(body);
      else if (body.detail && body.detail.draft) render(body.detail.draft);
      return body;
    }
    const postJson = (path, payload) => call(path, {
      method: "POST", headers: {"Content-Type": "application/json"},
      body: JSON.stringify(payload || {}),
    });

    function render(d) {
      $("preview").hidden = !d.image_preview;
      if (d.image_preview) $("preview").src = d.image_preview;
      $("analyze").hidden = !d.can_analyze && !d.analyzing;
      $("analyze").disabled = d.analyzing;
      $("analyze").textContent = d.analyzing ? "Analyzing Image..." : "Analyze Image with AI";
      $("analysis-error").hidden = !d.analysis_error || !!d.values.description;
      $("analysis-error").textContent = d.analysis_error || "";
      $("report-card").hidden = !d.values.description || d.submit_succeeded;
      $("success-card").hidden = !d.submit_succeeded;
      $("submit").disabled = d.submitting;
      $("submit").textContent = d.submitting ? "Sending Report..." : "Send Report";
      $("locate").disabled = d.locating;
      for (const [name, value] of Object.entries(d.values)) {
        const input = form.elements[name];
        if (!input || document.activeElement === input) continue;
        if (input.type === "checkbox") input.checked = value; else input.value = value;
      }
      for (const p of form.querySelectorAll(".error")) {
        const err = d.field_errors[p.dataset.for];
        p.textContent = err ? err.message : "";
      }
    }

    function listen() {
      const source = new EventSource(`/api/drafts/${draftId}/notifications/sse`);
      source.onmessage = (event) => {
        const n = JSON.parse(event.data);
        const li = document.createElement("li");
        li.className = n.variant;
        li.textContent = `${n.title}: ${n.description}`;
        $("toasts").appendChild(li);
        setTimeout(() => li.remove(), 5000);
      };
    }

    async function upload(file, path) {
      const data = new FormData();
      data.append("file", file);
      await call(path, {method: "POST", body: data});
    }

    function fields() {
      const data = {};
      for (const input of form.elements) {
        if (!input.name) continue;
        data[input.name] = input.type === "checkbox" ? input.checked : input.value;
      }
      return data;
    }

    $("dropzone-file").addEventListener("change", (e) => {
      if (e.target.files[0]) upload(e.target.files[0], "/image");
    });
    $("upload-card").addEventListener("dragover", (e) => e.preventDefault());
    $("upload-card").addEventListener("drop", (e) => {
      e.preventDefault();
      if (e.dataTransfer.files[0]) upload(e.dataTransfer.files[0], "/drop");
    });
    $("analyze").addEventListener("click", () => postJson("/analyze"));
    $("locate").addEventListener("click", () => {
      if (!navigator.geolocation) return postJson("/location", {error: "unsupported"});
      const codes = {1: "permission_denied", 2: "position_unavailable", 3: "timeout"};
      navigator.geolocation.getCurrentPosition(
        (pos) => postJson("/location", {
          latitude: pos.coords.latitude, longitude: pos.coords.longitude,
        }),
        (err) => postJson("/location", {error: codes[err.code] || "unknown"}),
        {timeout: 10000},
      );
    });
    form.addEventListener("submit", (e) => {
      e.preventDefault();
      postJson("/submit", fields());
    });
    $("reset").addEventListener("click", () => postJson("/reset"));
    window.addEventListener("pagehide", () => {
      if (draftId) fetch(`/api/drafts/${draftId}`, {method: "DELETE", keepalive: true});
    });

    fetch("/api/drafts", {method: "POST"}).then((r) => r.json()).then((d) => {
      draftId = d.draft_id;
      render(d);
      listen();
    });
  </script>
</body>
</html>
"""


def render_page(*, title: str = "CityLens", year: int | None = None) -> str:
    """Render the single-page report form."""
    resolved_year = year if year is not None else datetime.now(UTC).year
    return (
        _PAGE_TEMPLATE.replace("__TITLE__", escape(title))
        .replace("__LOGO__", LOGO_SVG)
        .replace("__YEAR__", str(resolved_year))
    )
