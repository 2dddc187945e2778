import argparse
import json
import sys

from instacomment.config import get_settings
from instacomment.errors import CommentServiceError
from instacomment.main import build_pipeline


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Generate comments for one Instagram post.")
    parser.add_argument("link", help="Instagram post, reel or tv link.")
    parser.add_argument(
        "--count",
        default=settings.default_count,
        help="Number of comments to generate.",
    )
    parser.add_argument(
        "--strategy",
        choices=["http", "browser"],
        default=settings.fetch_strategy,
        help="How to fetch the caption.",
    )
    parser.add_argument(
        "--format",
        choices=["json", "text"],
        default=settings.prompt_format,
        help="Prompt format sent to the model.",
    )
    args = parser.parse_args(argv)

    settings = settings.model_copy(update={"fetch_strategy": args.strategy, "prompt_format": args.format})
    pipeline = build_pipeline(settings)
    try:
        result = pipeline.run(args.link, args.count)
    except CommentServiceError as e:
        print(json.dumps({"ok": False, "error": e.message}, ensure_ascii=False))
        return 1

    print(json.dumps({"ok": True, "caption": result.caption, "comments": result.comments}, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
