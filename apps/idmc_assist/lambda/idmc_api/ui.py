"""Single-page question form served at the application root."""

from html import escape

from .constants import DEFAULT_MODEL_SELECTOR, MIN_QUESTION_LENGTH
from .model_registry import MODEL_OPTIONS

PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>IDMC Assist</title>
  <style>
    body {{ font-family: system-ui, sans-serif; max-width: 42rem; margin: 2rem auto; padding: 0 1rem; }}
    label {{ display: block; margin-top: 1rem; font-weight: 600; }}
    select, input, textarea {{ width: 100%; box-sizing: border-box; padding: .5rem; }}
    textarea {{ min-height: 120px; resize: none; }}
    button {{ margin-top: 1rem; padding: .6rem 1.2rem; }}
    .alert {{ border: 1px solid #c00; color: #900; padding: .75rem; margin-top: 1rem; }}
    .answer {{ border: 1px solid #ccc; padding: .75rem; margin-top: 1rem; white-space: pre-wrap; }}
    .feedback button[aria-pressed="true"] {{ background: #2563eb; color: #fff; }}
    .badge {{ display: inline-block; margin-top: 1rem; padding: .1rem .5rem; border: 1px solid #ccc; border-radius: 999px; font-size: .8rem; }}
    [hidden] {{ display: none; }}
  </style>
</head>
<body>
  <h1>IDMC Assist</h1>
  <p>Ask questions about Informatica IDMC and get AI-powered answers.</p>
  <form id="ask-form" novalidate>
    <label for="model-select">Select AI Model</label>
    <select id="model-select">{model_options}</select>
    <label for="api-key">Gemini API Key (Optional)</label>
    <input id="api-key" type="password" placeholder="Enter Google AI API key" autocomplete="off">
    <label for="question">Your Question</label>
    <textarea id="question" placeholder="e.g., How do I configure a mapping in IDMC?"></textarea>
    <div id="question-error" class="alert" hidden></div>
    <button id="submit" type="submit">Ask</button>
  </form>
  <div id="error" class="alert" role="alert" hidden></div>
  <div id="result" hidden>
    <span id="model-badge" class="badge"></span>
    <div id="answer" class="answer"></div>
    <div class="feedback">
      <span>Was this helpful?</span>
      <button type="button" data-mark="up" aria-label="Helpful" aria-pressed="false">&#128077;</button>
      <button type="button" data-mark="down" aria-label="Not helpful" aria-pressed="false">&#128078;</button>
    </div>
  </div>
  <script>
    const MIN_LENGTH = {min_length};
    const form = document.getElementById("ask-form");
    const submit = document.getElementById("submit");
    const questionError = document.getElementById("question-error");
    const errorBox = document.getElementById("error");
    const result = document.getElementById("result");
    const feedbackButtons = document.querySelectorAll(".feedback button");
    let feedback = null;

    function renderFeedback() {{
      feedbackButtons.forEach((button) => {{
        button.setAttribute("aria-pressed", String(button.dataset.mark === feedback));
      }});
    }}

    feedbackButtons.forEach((button) => {{
      button.addEventListener("click", () => {{
        feedback = feedback === button.dataset.mark ? null : button.dataset.mark;
        renderFeedback();
      }});
    }});

    form.addEventListener("submit", async (event) => {{
      event.preventDefault();
      const question = document.getElementById("question").value;
      if (question.length < MIN_LENGTH) {{
        questionError.textContent = `Question must be at least ${{MIN_LENGTH}} characters.`;
        questionError.hidden = false;
        return;
      }}
      questionError.hidden = true;
      errorBox.hidden = true;
      result.hidden = true;
      feedback = null;
      renderFeedback();
      submit.disabled = true;
      submit.textContent = "Consulting AI...";
      const modelId = document.getElementById("model-select").value;
      try {{
        const apiKey = document.getElementById("api-key").value;
        const response = await fetch("api/ask", {{
          method: "POST",
          headers: {{ "Content-Type": "application/json" }},
          body: JSON.stringify({{
            question,
            modelId,
            apiKey: apiKey || undefined,
          }}),
        }});
        const payload = await response.json();
        if (!response.ok) {{
          const detail = payload.detail;
          throw new Error(typeof detail === "string" ? detail : "An unexpected error occurred.");
        }}
        document.getElementById("model-badge").textContent = `Model: ${{modelId}}`;
        document.getElementById("answer").textContent = payload.answer;
        result.hidden = false;
      }} catch (error) {{
        errorBox.textContent = error.message || "An unexpected error occurred.";
        errorBox.hidden = false;
      }} finally {{
        submit.disabled = false;
        submit.textContent = "Ask";
      }}
    }});
  </script>
</body>
</html>
"""


def _render_option(selector: str, label: str) -> str:
    selected = " selected" if selector == DEFAULT_MODEL_SELECTOR else ""
    return f'<option value="{escape(selector)}"{selected}>{escape(label)}</option>'


def render_page() -> str:
    model_options = "".join(
        _render_option(option.selector, option.label) for option in MODEL_OPTIONS
    )
    return PAGE_TEMPLATE.format(model_options=model_options, min_length=MIN_QUESTION_LENGTH)
