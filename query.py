#!/usr/bin/env python3
"""Ad hoc query runner for Kitchen Assistant.

Run the assistant directly from the command line.

Usage:
    python query.py "How long should I rest a steak?"
    python query.py --image images/fridge.jpg  # Detect ingredients, then find recipes
    python query.py --ingredients "egg,cheese,spinach"  # Find recipes
    python query.py --debug --ingredients "egg,cheese"  # Show full JSON response

Features:
- Cooking questions answered with Markdown rendering
- Ingredient detection from a local image file
- Recipe search from listed or detected ingredients
- Debug mode to display full JSON of every result
"""

import argparse
import asyncio
import base64
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from kitchen_assistant import KitchenAssistant, KitchenAssistantError
from kitchen_assistant.models.models import dump_records
from kitchen_assistant.utils.config import Config
from kitchen_assistant.utils.logger import configure_logging, logger

console = Console()

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def load_image_as_data_uri(image_path: str) -> str:
    """Read an image file and encode it as a base64 data URI.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    image_file = Path(image_path)
    if not image_file.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    image_data = base64.b64encode(image_file.read_bytes()).decode("utf-8")
    mime_type = MIME_TYPES.get(image_file.suffix.lower(), "image/jpeg")
    logger.info(f"✓ Loaded image: {image_file.name} ({len(image_data) / 1024:.1f} KB base64)")
    return f"data:{mime_type};base64,{image_data}"


def render_recipes(recipes) -> None:
    table = Table(title="Recipes")
    table.add_column("Title", style="bold")
    table.add_column("Ready in")
    table.add_column("Servings")
    table.add_column("Missing ingredients")
    table.add_column("Source")

    for recipe in recipes:
        table.add_row(
            recipe.title or str(recipe.id),
            f"{recipe.ready_in_minutes} min" if recipe.ready_in_minutes is not None else "-",
            str(recipe.servings) if recipe.servings is not None else "-",
            ", ".join(item.name for item in recipe.missed_ingredients) or "-",
            recipe.source_url or "-",
        )

    console.print(table)


async def run_query(
    question: Optional[str],
    image_path: Optional[str] = None,
    ingredients: Optional[list[str]] = None,
    debug: bool = False,
) -> None:
    """Run the operations requested on the command line and print the results.

    Args:
        question: Optional cooking question for the chat assistant.
        image_path: Optional image file to detect ingredients in.
        ingredients: Optional ingredient list for recipe search. When an image
            is given and no list is, the detected ingredients are used.
        debug: If True, display full JSON of each result.
    """
    async with KitchenAssistant.from_config(Config()) as assistant:
        if image_path:
            detection = await assistant.detect_ingredients(load_image_as_data_uri(image_path))
            if debug:
                console.print_json(data=detection.model_dump(mode="json", by_alias=True))
            console.print(f"[bold]Detected ingredients:[/bold] {', '.join(detection.ingredients) or 'none'}")
            if not ingredients:
                ingredients = detection.ingredients

        if ingredients:
            recipes = await assistant.get_recipes(ingredients)
            if debug:
                console.print_json(data=dump_records(recipes))
            render_recipes(recipes)

        if question:
            reply = await assistant.ask_cooking_assistant(question)
            console.print()
            console.print(Markdown(reply))


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ask the kitchen assistant from the command line.")
    parser.add_argument("question", nargs="*", help="Cooking question for the assistant")
    parser.add_argument("--image", help="Path to an image to detect ingredients in")
    parser.add_argument("--ingredients", help="Comma-separated ingredients to search recipes for")
    parser.add_argument("--debug", action="store_true", help="Show full JSON responses")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging()
    question = " ".join(args.question) or None
    ingredients = args.ingredients.split(",") if args.ingredients else None

    if not (question or args.image or ingredients):
        console.print("[red]✗ Nothing to do: give a question, --image or --ingredients[/red]")
        return 1

    try:
        asyncio.run(run_query(question, image_path=args.image, ingredients=ingredients, debug=args.debug))
    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        return 0
    except (KitchenAssistantError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
