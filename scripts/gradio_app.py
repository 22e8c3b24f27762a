"""
Gradio Frontend for LlamaSQL
Chat with the hospital database in plain English.

Run with: python -m scripts.gradio_app
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

import gradio as gr

# Add project root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from llamasql.agent import configure_logging, new_conversation, take_turn
from llamasql.agent_core import Orchestrator
from llamasql.explain import render_payload
from llamasql.llm import model_name
from llamasql.sql.executor import get_store


# ============================================================
# WELCOME MESSAGE
# ============================================================

WELCOME_MESSAGE = """## 👋 Welcome to LlamaSQL!

Ask questions about the **hospital database** in plain English.
I'll write the SQL, run it, and show you the result.

| Table | What's in it |
|-------|--------------|
| 🧑 **patients** | name, gender, birth date, city, province, allergies, height, weight |
| 🩺 **doctors** | name and specialty |
| 🏥 **admissions** | admission / discharge dates, diagnosis, attending doctor |
| 🗺️ **province_names** | province codes and names |

> **Pro tip:** single numbers (counts, totals) are shown big; everything else as a table.
"""


# ============================================================
# CSS STYLING
# ============================================================

CUSTOM_CSS = """
.gradio-container {
    max-width: 100% !important;
    padding: 0 20px !important;
}

#chatbot {
    height: 60vh !important;
    min-height: 400px !important;
    border-radius: 12px !important;
    border: 1px solid #e0e0e0 !important;
}

.dark #chatbot {
    border-color: #374151 !important;
    background: #1f2937 !important;
}

#chatbot table {
    font-size: 13px !important;
    width: 100% !important;
    margin: 10px 0 !important;
}

#chatbot h2 {
    font-size: 28px !important;
    color: #3730a3 !important;
}

#msg-input {
    border-radius: 10px !important;
}

.example-btn {
    font-size: 13px !important;
    padding: 8px 12px !important;
}

.status-badge {
    display: inline-block;
    padding: 4px 12px;
    border-radius: 20px;
    font-size: 12px;
    font-weight: 500;
    background: #d1fae5;
    color: #065f46;
}
"""

EXAMPLES = [
    "🧑 How many patients are there?",
    "🗺️ Patients per province",
    "🩺 Which doctor has the most admissions?",
    "🏥 Admissions not yet discharged",
]


# ============================================================
# AGENT STATE
# ============================================================

# Seeded once at startup; every session shares the store.
orchestrator = Orchestrator(store=get_store())


def model_status() -> str:
    if orchestrator.client is None:
        return "Deterministic (type SQL)"
    return f"Model: {model_name()}"


def respond(
    message: str,
    chat_history: List[Dict[str, Any]],
    conversation: List[Dict[str, Any]],
) -> Tuple[str, List[Dict[str, Any]], List[Dict[str, Any]]]:
    message = (message or "").strip()
    if not message:
        return "", chat_history, conversation

    conversation = list(conversation or new_conversation())
    text = take_turn(orchestrator, conversation, message)

    chat_history = chat_history + [
        {"role": "user", "content": message},
        {"role": "assistant", "content": render_payload(text)},
    ]
    return "", chat_history, conversation


def ask_example(question: str):
    def handler(chat_history, conversation):
        return respond(question, chat_history, conversation)
    return handler


# ============================================================
# GRADIO UI
# ============================================================

def create_interface():
    """Create and configure the Gradio interface"""

    with gr.Blocks(title="LlamaSQL") as demo:
        gr.HTML(f"""
        <div style="display: flex; justify-content: space-between; align-items: center; margin-bottom: 16px;">
            <h1 style="margin: 0; font-size: 24px;">🦙 LlamaSQL</h1>
            <span class="status-badge">⚡ {model_status()}</span>
        </div>
        """)

        conversation = gr.State(new_conversation())

        chatbot = gr.Chatbot(
            elem_id="chatbot",
            value=[{"role": "assistant", "content": WELCOME_MESSAGE}],
            height=450,
        )

        with gr.Row():
            msg = gr.Textbox(
                elem_id="msg-input",
                placeholder="Ask about patients, doctors or admissions...",
                show_label=False,
                lines=1,
                scale=5,
            )
            submit_btn = gr.Button("Send", variant="primary", scale=1)
            clear_btn = gr.Button("🗑️ Clear Chat", scale=1)

        gr.HTML("<p style='margin: 16px 0 8px 0; font-weight: 600; font-size: 14px;'>💡 Example Questions</p>")
        with gr.Row():
            example_btns = [gr.Button(text, elem_classes="example-btn") for text in EXAMPLES]

        def clear_chat():
            return [{"role": "assistant", "content": WELCOME_MESSAGE}], "", new_conversation()

        msg.submit(respond, [msg, chatbot, conversation], [msg, chatbot, conversation])
        submit_btn.click(respond, [msg, chatbot, conversation], [msg, chatbot, conversation])
        clear_btn.click(clear_chat, outputs=[chatbot, msg, conversation])

        for btn, text in zip(example_btns, EXAMPLES):
            btn.click(
                ask_example(text.split(" ", 1)[1]),
                [chatbot, conversation],
                [msg, chatbot, conversation],
            )

    return demo


# ============================================================
# MAIN
# ============================================================

if __name__ == "__main__":
    configure_logging()
    print("Starting LlamaSQL...")
    print(f"Gradio version: {gr.__version__}")

    demo = create_interface()
    demo.launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=False,
        css=CUSTOM_CSS,
    )
