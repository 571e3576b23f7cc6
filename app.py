import gradio as gr

from xml_field_analyzer.config import get_setting
from xml_field_analyzer.flattening import (
    DIFFERENCE_COLUMNS,
    FIELD_COLUMNS,
    MERGED_COLUMNS,
    NAME_SUMMARY_COLUMNS,
    PATH_SUMMARY_COLUMNS,
    UNIQUE_COLUMNS,
)
from xml_field_analyzer.handlers_compare import (
    CONDITION_COLUMNS,
    REPORTS,
    add_condition_handler,
    clear_conditions_handler,
    export_comparison_handler,
    run_comparison_handler,
    update_filter_fields,
)
from xml_field_analyzer.handlers_single import (
    export_fields_handler,
    load_files_handler,
    remove_file_handler,
    show_file_handler,
)
from xml_field_analyzer.logging_utils import configure_logging

configure_logging(
    get_setting("logging.level", "INFO"),
    silenced_loggers={"httpx": "WARNING", "gradio": "WARNING"},
)

# --- UI Definition ---
with gr.Blocks(title="XML Field Analyzer") as demo:
    gr.Markdown("# XML Field Analyzer")
    gr.Markdown("Analyze, compare, and export XML structures. All processing is done locally.")

    # State
    file_sets_state = gr.State(value=[])
    outlines_state = gr.State(value={})

    with gr.Row():
        with gr.Column(scale=1):
            gr.Markdown("### 1. Load Files")
            file_input = gr.File(label="Upload XML or TXT files", file_types=[".xml", ".txt"], file_count="multiple")
            status_msg = gr.Textbox(label="Status", interactive=False, lines=3)
            file_selector = gr.Dropdown(label="Loaded Files", choices=[], interactive=True)
            remove_btn = gr.Button("Remove Selected File")
            prefix_input = gr.Textbox(
                label="Namespace Prefix to Hide",
                value=get_setting("display.namespace_prefix", ""),
                placeholder="e.g. ns0:",
            )

        with gr.Column(scale=3):
            with gr.Tab("Single File Analysis"):
                stats_md = gr.Markdown()
                with gr.Row():
                    search_input = gr.Textbox(label="Search fields", placeholder="Search fields...")
                    nested_only = gr.Checkbox(label="Nested fields only", value=False)
                with gr.Row():
                    field_outline = gr.Textbox(label="Field Structure", lines=20, interactive=False)
                    element_outline = gr.Textbox(label="Document Tree", lines=20, interactive=False)
                fields_table = gr.Dataframe(headers=FIELD_COLUMNS, interactive=False, label="Fields")
                with gr.Row():
                    single_format = gr.Radio(choices=["CSV", "JSON"], value="CSV", label="Output Format")
                    single_export_btn = gr.Button("Export Fields", variant="primary")
                single_download = gr.File(label="Download Result")

            with gr.Tab("Compare Files"):
                gr.Markdown("### Filter files by field values (`*` is a wildcard)")
                with gr.Row():
                    filter_field = gr.Dropdown(label="Field", choices=[], interactive=True, allow_custom_value=True)
                    filter_value = gr.Textbox(label="Value", placeholder="e.g. ABC*")
                    filter_case = gr.Checkbox(label="Case sensitive", value=False)
                with gr.Row():
                    add_condition_btn = gr.Button("Add Condition")
                    clear_conditions_btn = gr.Button("Clear Conditions")
                conditions_table = gr.Dataframe(
                    headers=CONDITION_COLUMNS,
                    datatype=["str", "str", "bool"],
                    col_count=(3, "fixed"),
                    interactive=True,
                    label="Active Conditions",
                )
                compare_btn = gr.Button("Compare", variant="primary")
                compare_status = gr.Textbox(label="Comparison", interactive=False)

                with gr.Tab("Common Fields"):
                    common_outline = gr.Textbox(label="Fields present in all files", lines=15, interactive=False)
                with gr.Tab("Differences"):
                    differences_table = gr.Dataframe(headers=DIFFERENCE_COLUMNS, interactive=False)
                with gr.Tab("Unique Fields"):
                    unique_table = gr.Dataframe(headers=UNIQUE_COLUMNS, interactive=False)
                with gr.Tab("Field Statistics"):
                    name_summary_table = gr.Dataframe(headers=NAME_SUMMARY_COLUMNS, interactive=False)
                with gr.Tab("Path Statistics"):
                    path_summary_table = gr.Dataframe(headers=PATH_SUMMARY_COLUMNS, interactive=False)
                with gr.Tab("Merged Structure"):
                    merged_table = gr.Dataframe(headers=MERGED_COLUMNS, interactive=False)

                gr.Markdown("### Export")
                with gr.Row():
                    report_selector = gr.Dropdown(label="Report", choices=list(REPORTS), value="Field Name Summary")
                    compare_format = gr.Radio(choices=["CSV", "JSON"], value="CSV", label="Output Format")
                    compare_filename = gr.Textbox(label="Output Filename (optional)", placeholder="report")
                compare_export_btn = gr.Button("Export Report")
                compare_download = gr.File(label="Download Report")

    single_view_inputs = [file_sets_state, outlines_state, file_selector, search_input, nested_only, prefix_input]
    single_view_outputs = [stats_md, field_outline, element_outline, fields_table]

    file_input.upload(
        fn=load_files_handler,
        inputs=[file_input, file_sets_state, outlines_state],
        outputs=[file_sets_state, outlines_state, file_selector, status_msg],
    ).then(
        fn=update_filter_fields,
        inputs=[file_sets_state, prefix_input],
        outputs=[filter_field],
    )

    remove_btn.click(
        fn=remove_file_handler,
        inputs=[file_sets_state, outlines_state, file_selector],
        outputs=[file_sets_state, outlines_state, file_selector, status_msg],
    ).then(
        fn=update_filter_fields,
        inputs=[file_sets_state, prefix_input],
        outputs=[filter_field],
    )

    for trigger in (file_selector.change, search_input.change, nested_only.change, prefix_input.change):
        trigger(fn=show_file_handler, inputs=single_view_inputs, outputs=single_view_outputs)

    single_export_btn.click(
        fn=export_fields_handler,
        inputs=[file_sets_state, file_selector, single_format, prefix_input],
        outputs=[single_download, status_msg],
    )

    add_condition_btn.click(
        fn=add_condition_handler,
        inputs=[conditions_table, filter_field, filter_value, filter_case],
        outputs=[conditions_table],
    )

    clear_conditions_btn.click(fn=clear_conditions_handler, inputs=[], outputs=[conditions_table])

    compare_btn.click(
        fn=run_comparison_handler,
        inputs=[file_sets_state, conditions_table, prefix_input],
        outputs=[
            compare_status,
            common_outline,
            differences_table,
            unique_table,
            name_summary_table,
            path_summary_table,
            merged_table,
        ],
    )

    compare_export_btn.click(
        fn=export_comparison_handler,
        inputs=[file_sets_state, conditions_table, prefix_input, report_selector, compare_format, compare_filename],
        outputs=[compare_download, compare_status],
    )

if __name__ == "__main__":
    demo.launch()
