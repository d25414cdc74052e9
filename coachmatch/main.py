from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
import typer
from rich import print
from rich.markup import escape
from rich.table import Table

from .config import Settings, load_settings
from .data_models import InstructorProfile, LearnerProfile
from .errors import CoachMatchError
from .ingest import clean_profiles_df, find_profile, load_profiles
from .logs import configure_logging
from .ranking import rank_candidates, ranking_frame
from .scoring import score_pair
from .synthetic import generate_profiles, write_profiles


app = typer.Typer(help="Instructor/learner compatibility ranking CLI")

AnyProfile = Union[InstructorProfile, LearnerProfile]

_state = {"settings": Settings()}


def _fail(message: str) -> None:
	print(f"[red]Error:[/red] {escape(message)}")
	raise typer.Exit(code=1)


def _resolve_path(path: Optional[Path]) -> Path:
	resolved = path or _state["settings"].profiles_path
	if resolved is None:
		_fail("No profile export given and COACHMATCH_PROFILES_PATH is not set")
	return resolved


def _load(path: Optional[Path], skip_invalid: bool) -> List[AnyProfile]:
	try:
		return load_profiles(_resolve_path(path), skip_invalid=skip_invalid)
	except CoachMatchError as e:
		_fail(str(e))


@app.callback()
def main(
	log_level: Optional[str] = typer.Option(None, help="Override COACHMATCH_LOG_LEVEL"),
):
	"""Load settings from the environment (and .env) before running a command."""
	try:
		settings = load_settings()
	except CoachMatchError as e:
		_fail(str(e))
	if log_level:
		settings = settings.model_copy(update={"log_level": log_level.upper()})
	_state["settings"] = settings
	configure_logging(settings.log_level)


@app.command()
def rank(
	me: str = typer.Option(..., "--me", help="Id of the acting user"),
	profiles_path: Optional[Path] = typer.Argument(None, help="Profile export (.csv or .json)"),
	top_k: Optional[int] = typer.Option(None, help="Number of candidates to show (0 = all)"),
	out_path: Optional[Path] = typer.Option(None, "--out", help="Write the full ranking to this CSV"),
	skip_invalid: bool = typer.Option(False, "--skip-invalid/--strict", help="Skip invalid records instead of failing"),
):
	"""Rank opposite-role candidates for one user, best first."""
	profiles = _load(profiles_path, skip_invalid)
	try:
		me_profile = find_profile(profiles, me)
	except CoachMatchError as e:
		_fail(str(e))

	ranked = rank_candidates(me_profile, profiles)
	if not ranked:
		print(f"[yellow]No candidates found for {me} ({me_profile.role}).[/yellow]")
		return

	if out_path:
		ranking_frame(ranked).to_csv(out_path, index=False)
		print(f"[green]Saved ranking to[/green] {out_path}")

	k = _state["settings"].top_k if top_k is None else top_k
	shown = ranked[:k] if k > 0 else ranked
	table = Table("#", "id", "name", "score", "rank", "details", title=f"Candidates for {me}")
	for i, r in enumerate(shown, start=1):
		name = (r.profile.model_extra or {}).get("name") or ""
		table.add_row(str(i), r.id, str(name), str(r.score), f"{r.rank.badge} {r.rank.value}", "\n".join(r.details))
	print(table)


@app.command()
def score(
	instructor_id: str = typer.Argument(..., help="Instructor profile id"),
	learner_id: str = typer.Argument(..., help="Learner profile id"),
	profiles_path: Optional[Path] = typer.Argument(None, help="Profile export (.csv or .json); defaults to COACHMATCH_PROFILES_PATH"),
):
	"""Show the score breakdown for one instructor/learner pair."""
	profiles = _load(profiles_path, skip_invalid=False)
	try:
		instructor = find_profile(profiles, instructor_id)
		learner = find_profile(profiles, learner_id)
		result = score_pair(instructor, learner)
	except CoachMatchError as e:
		_fail(str(e))

	print(f"[bold]{instructor_id} x {learner_id}[/bold]: {result.score} pts, {result.rank.badge} {result.rank.value}")
	for line in result.details:
		print(f"  - {line}")


@app.command()
def clean(
	csv_path: Path = typer.Argument(..., help="Raw profile CSV export"),
	out_path: Optional[Path] = typer.Option(None, help="Where to write cleaned CSV"),
):
	"""Normalize a profile CSV export to canonical column names."""
	if not csv_path.exists():
		_fail(f"Profile export not found: {csv_path}")
	df = clean_profiles_df(pd.read_csv(csv_path, dtype=str))
	out = out_path or csv_path.with_name(f"{csv_path.stem}_cleaned.csv")
	df.to_csv(out, index=False)
	print(f"[green]Wrote cleaned data to[/green] {out}")


@app.command()
def synth(
	out_path: Path = typer.Argument(..., help="Output file (.csv or .json)"),
	count: int = typer.Option(50, help="Number of profiles"),
	seed: Optional[int] = typer.Option(None, help="Random seed for a reproducible population"),
	instructor_share: float = typer.Option(0.4, help="Fraction of instructors"),
):
	"""Write a synthetic instructor/learner population."""
	try:
		profiles = generate_profiles(count, seed=seed, instructor_share=instructor_share)
		write_profiles(profiles, out_path)
	except (CoachMatchError, ValueError) as e:
		_fail(str(e))
	print(f"[bold]Generated {len(profiles)} profiles[/bold] -> {out_path}")


if __name__ == "__main__":
	app()
