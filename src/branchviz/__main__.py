import argparse
import logging
import os
import sys

from branchviz.api import RENDERERS, fetch_repository
from branchviz.exceptions import BranchVizError
from branchviz.layout import DEFAULT_DISPLAY_LIMIT
from branchviz.renderers import Renderer
from branchviz.view import GraphView


def create_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="branchviz", description="Visualize the branches and commits of a GitHub repository")
    parser.add_argument("repository", help="github.com/owner/repo URL or owner/repo shorthand")
    parser.add_argument(
        "--token", default=os.environ.get("GITHUB_TOKEN"),
        help="GitHub personal access token (defaults to $GITHUB_TOKEN)")
    parser.add_argument("--format", choices=sorted(RENDERERS), default="text")
    parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    parser.add_argument("--limit", type=int, default=DEFAULT_DISPLAY_LIMIT, help="Number of commits to display")
    parser.add_argument(
        "--hide", action="append", default=[], metavar="BRANCH",
        help="Hide commits labelled with this branch (repeatable)")
    debug_level = parser.add_mutually_exclusive_group()
    debug_level.add_argument(
        '-d', '--debug',
        help="activate DEBUG output",
        default=False,
        action='store_true'
    )
    debug_level.add_argument(
        '-q', '--quiet',
        help="suppress INFO output",
        default=False,
        action='store_true'
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser: argparse.ArgumentParser = create_cli()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(levelname)s - %(message)s')
    elif args.quiet:
        logging.basicConfig(format='%(asctime)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(asctime)s - %(levelname)s - %(message)s')

    if args.limit < 0:
        parser.error("--limit must be >= 0")

    try:
        data = fetch_repository(args.repository, token=args.token)
    except BranchVizError as e:
        logging.error(str(e))
        return 1

    if data.has_incomplete_stats:
        logging.warning(
            "Some commit details may be missing due to GitHub API rate limits. "
            "Detailed statistics are only available for the most recent commits.")

    if not data.commits or not data.branches:
        logging.warning("No commits or branches found in this repository.")
        return 0

    view = GraphView(data.commits, data.branches, display_limit=args.limit)
    for name in args.hide:
        if name not in view.visible_branches:
            logging.warning("Unknown branch %s, ignoring --hide", name)
        view.set_branch_visible(name, False)

    layout = view.layout
    logging.info("Showing %d / %d commits of %s/%s", layout.shown, layout.total, data.owner, data.repo)

    renderer: Renderer = RENDERERS[args.format]()
    output = renderer.render(layout)

    if args.output:
        with open(args.output, 'w') as f:
            f.write(output)
        logging.info(f"Graph saved in {args.output}")
    else:
        sys.stdout.write(output + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
