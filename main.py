#!/usr/bin/env python3

import asyncio
import logging
import os
import sys

from coatpath.gcode_generator import GenerationError, generate_gcode
from coatpath.project_loader import ParseError, parse_project_file
from coatpath.user_interface import select_input_file, get_coating_parameters, display_summary
from coatpath.utils.file_manager import write_gcode_file
from coatpath.utils.validators import validate_settings, validate_shapes_in_work_area
from coatpath.visualizer import plot_toolpath_preview, save_plot_preview


def print_progress(percent: float, message: str) -> None:
    print(f"  [{percent:5.1f}%] {message}")


def main():
    """Main application entry point."""
    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'WARNING'),
                        format='%(levelname)s %(name)s: %(message)s')

    print("=== Coating Path Generator ===")
    print("Generate coating G-code from editor project files\n")

    # Ensure output directory exists
    os.makedirs("output", exist_ok=True)

    while True:  # Loop to allow retry on parse errors
        try:
            input_file = select_input_file()
            print(f"\nSelected project file: {input_file}")

            print("Parsing project file...")
            project = parse_project_file(input_file)

            print(f"\nFound {len(project.shapes)} shape(s)")
            for message in project.skipped:
                print(f"- {message}")

            break  # Successfully parsed, exit retry loop

        except ParseError as e:
            print(f"\n❌ ERROR: Problem with project file:")
            print(f"{str(e)}")
            print(f"\nPlease fix the project file and try again.")

            retry = input("\nWould you like to select a different file or retry? (y/n): ").lower().strip()
            if retry not in ['y', 'yes']:
                print("Exiting...")
                sys.exit(1)
            continue

    settings = get_coating_parameters(project.settings)

    errors = validate_settings(settings) + validate_shapes_in_work_area(project.shapes, project.work_area)
    if errors:
        print("\n❌ Invalid project:")
        for error in errors:
            print(f"- {error}")
        sys.exit(1)

    base_name = os.path.splitext(os.path.basename(input_file))[0]
    output_file = os.path.join("output", f"{base_name}.gcode")

    if not display_summary(input_file, project, settings, output_file):
        print("Operation cancelled.")
        return

    try:
        print("\nGenerating G-code...")
        result = asyncio.run(generate_gcode(
            project.shapes, settings, project.work_area, project.snippets, print_progress
        ))
    except GenerationError as e:
        print(f"\n❌ Error generating G-code: {str(e)}")
        sys.exit(1)

    if result.is_empty:
        print(f"ℹ️  {result.message} - no G-code file generated")
        return

    write_gcode_file("output", base_name, result.gcode)
    print(f"✅ {result.message}: {output_file}")

    show_plot = input("\nWould you like to see a visual preview of the toolpath? (y/n): ").lower().strip()
    if show_plot in ['y', 'yes']:
        print("Generating visual preview...")
        plot_filename = save_plot_preview(result.preview_path, settings, base_name)
        print(f"Plot saved to: {plot_filename}")

        plot_toolpath_preview(result.preview_path, settings)

    show_gcode_preview = input("\nWould you like to see a preview of the generated G-code text? (y/n): ").lower().strip()
    if show_gcode_preview in ['y', 'yes']:
        lines = result.gcode.split('\n')
        print(f"\n--- G-code Preview (first 10 lines) ---")
        for i, line in enumerate(lines[:10]):
            print(f"{i+1:2d}: {line}")
        if len(lines) > 10:
            print(f"... ({len(lines) - 10} more lines)")


if __name__ == "__main__":
    main()
