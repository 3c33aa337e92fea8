#!/usr/bin/env python3
"""
Patient Medication Games - Web Interface

Collects patient information, shows how each medication was matched to a
DailyMed label, and returns the generated learning modules as JSON.
"""

from datetime import datetime

import gradio as gr
from pydantic import ValidationError

from main import PatientEducationSystem, build_system

LOG_HEADERS = ["Medication", "Search term", "Found", "Result", "Rejected", "Error / note"]


def format_steps(steps) -> str:
    """Render processing steps as a markdown checklist."""
    icons = {"complete": "✅", "processing": "⏳", "pending": "•", "error": "❌"}
    return "\n".join(f"{icons.get(s['status'], '•')} **{s['step']}**: {s['message']}" for s in steps)


def log_rows(search_log):
    """Flatten search log dicts into table rows."""
    rows = []
    for entry in search_log:
        rows.append([
            entry["medication"],
            entry["searchTerm"],
            "yes" if entry["found"] else "no",
            entry.get("resultTitle") or "",
            "\n".join(entry.get("rejectedReasons") or []),
            entry.get("error") or entry.get("note") or "",
        ])
    return rows


def run_pipeline(system: PatientEducationSystem, patient_info: str, difficulty_level: str):
    """
    Validate input and generate modules.

    Returns:
        Tuple of (status_markdown, log_rows, modules_json)
    """
    try:
        request = system.validate_request(patient_info, difficulty_level)
    except ValidationError as e:
        return f"❌ Invalid patient information: {e.errors()[0]['msg']}", [], {}

    try:
        response = system.generate_modules(request.patient_info, request.difficulty_level)
    except Exception as e:
        return f"❌ System Error: {str(e)}\nPlease try again.", [], {}

    status = f"{'✅' if response['success'] else '❌'} {response['message']}\n\n{format_steps(response['processingSteps'])}"
    payload = {
        "assessment": response.get("assessment"),
        "modules": response.get("modules", []),
        "dailyMedResults": response["dailyMedResults"],
    }
    return status, log_rows(response["searchLog"]), payload


def create_example_patients():
    """Sample patient descriptions for quick testing."""
    return [
        "68 year old with type 2 diabetes on metformin 500mg twice daily and lisinopril 10mg daily.",
        "COPD patient using tiotropium 18mcg via HandiHaler once daily and albuterol inhaler as needed.",
        "Started metformin ER 750mg with evening meal, also takes amlodipine/benazepril 5/10mg.",
    ]


def create_interface(system: PatientEducationSystem):
    """Create the patient education web interface."""

    with gr.Blocks(theme=gr.themes.Soft(), title="Patient Medication Games") as demo:

        gr.HTML(
            f"""
        <div style="text-align:center">
            <h1>💊 Patient Medication Games</h1>
            <p>Learning games built from patient information and FDA drug labels</p>
            <p><small>Data source: FDA DailyMed | {datetime.now().strftime('%Y-%m-%d')}</small></p>
        </div>
        """
        )

        with gr.Row():
            with gr.Column(scale=3):
                patient_input = gr.Textbox(
                    lines=6,
                    label="📝 Patient information",
                    placeholder="Diagnoses, medications with dosage and delivery method...",
                )
                gr.Examples(examples=create_example_patients(), inputs=patient_input, label="💡 Examples")

            with gr.Column(scale=1):
                level = gr.Dropdown(
                    choices=["auto", "beginner", "intermediate", "advanced"],
                    value="auto",
                    label="Difficulty level",
                    info="auto generates all three modules",
                )

        submit_btn = gr.Button("🎮 Generate Learning Modules", variant="primary", size="lg")

        status_output = gr.Markdown(value="")
        gr.Markdown("## Medication Search Log")
        log_output = gr.Dataframe(headers=LOG_HEADERS, wrap=True)
        gr.Markdown("## Learning Modules")
        modules_output = gr.JSON()

        def handle_submit(patient_info, difficulty_level):
            return run_pipeline(system, patient_info, difficulty_level)

        submit_btn.click(
            fn=handle_submit,
            inputs=[patient_input, level],
            outputs=[status_output, log_output, modules_output],
            show_progress="full",
        )

    return demo


def main():
    """Launch the interface."""
    system = build_system()
    if system.generator is None:
        print("❌ MISTRAL_API_KEY not found in environment")
        return

    print("🌐 Launching interface...")
    demo = create_interface(system)
    demo.launch(share=False, server_name="0.0.0.0", show_error=True)


if __name__ == "__main__":
    main()
