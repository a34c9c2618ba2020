import os
import sys
from dataclasses import replace
from typing import List

from .models import CoatingSettings
from .project_loader import ProjectData


def get_input_files(input_dir: str = "input") -> List[str]:
    """Get list of available project files."""
    if not os.path.exists(input_dir):
        return []

    return sorted(f for f in os.listdir(input_dir) if f.endswith('.json'))


def select_input_file(input_dir: str = "input") -> str:
    """Prompt user to select a project file."""
    files = get_input_files(input_dir)

    if not files:
        print(f"No project files found in the '{input_dir}' directory.")
        print("Please export a .json project from the editor into it.")
        sys.exit(1)

    print("Available project files:")
    for i, file in enumerate(files, 1):
        print(f"{i}. {file}")

    while True:
        try:
            choice = int(input(f"\nSelect file (1-{len(files)}): ")) - 1
            if 0 <= choice < len(files):
                return os.path.join(input_dir, files[choice])
            else:
                print(f"Please enter a number between 1 and {len(files)}")
        except ValueError:
            print("Please enter a valid number")


def get_float_input(prompt: str, default: float) -> float:
    while True:
        user_input = input(f"{prompt} (default: {default:g}): ").strip()
        if not user_input:
            return default
        try:
            return float(user_input)
        except ValueError:
            print("Please enter a valid number")


def get_coating_parameters(defaults: CoatingSettings) -> CoatingSettings:
    """Prompt user for coating parameters, starting from the project's settings."""
    print("\n=== COATING Parameters ===")
    print("Press Enter to keep the value from the project file:")

    return replace(
        defaults,
        coating_speed=get_float_input("Coating speed (mm/min)", defaults.coating_speed),
        move_speed=get_float_input("Move speed (mm/min)", defaults.move_speed),
        safe_height=get_float_input("Safe height (mm)", defaults.safe_height),
        coating_height=get_float_input("Coating height (mm)", defaults.coating_height),
        line_spacing=get_float_input("Line spacing (canvas units)", defaults.line_spacing),
        pixels_per_mm=get_float_input("Canvas pixels per mm", defaults.pixels_per_mm),
    )


def display_summary(input_file: str, project: ProjectData, settings: CoatingSettings, output_file: str) -> bool:
    """Display a summary of the run and ask for confirmation."""
    coatable = [s for s in project.shapes if s.is_coatable and not s.skip_coating]
    masks = [s for s in project.shapes if s.is_mask and not s.skip_coating]

    print(f"\n=== Operation Summary ===")
    print(f"Input file: {input_file}")
    print(f"G-code file: {output_file}")
    print(f"Shapes to coat: {len(coatable)}")
    print(f"Masking shapes: {len(masks)}{'' if settings.enable_masking else ' (masking disabled)'}")
    print(f"Work area: {project.work_area.width:g} x {project.work_area.height:g} canvas units")

    print(f"\nCoating Parameters:")
    print(f"  Coating speed: {settings.coating_speed:g} mm/min")
    print(f"  Move speed: {settings.move_speed:g} mm/min")
    print(f"  Safe height: {settings.safe_height:g} mm")
    print(f"  Coating height: {settings.coating_height:g} mm")
    print(f"  Fill pattern: {settings.fill_pattern}")
    print(f"  Travel avoidance: {settings.travel_avoidance_strategy}")
    print(f"  Scale: {settings.pixels_per_mm:g} px/mm")

    confirm = input("\nProceed with G-code generation? (y/n): ").lower().strip()
    return confirm in ['y', 'yes']
