"""CLI commands for inspecting vertex queues and replaying recorded exams."""

from __future__ import annotations

import asyncio
import typing as t
from pathlib import Path

import pydantic as p
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import viva.lib.cli as click
import viva.lib.json
from viva.core import di, LoggingProvider, VivaContainer
from viva.exam import build_queue, CATALOG, ExamError, ExamSession, get_definition
from viva.llm import BackgroundAnalyzer
from viva.model import BaseModel, Phase, ProbeAnalysis, ProbeLayer, TargetBody

console = Console()


class ReplayStep(BaseModel):
    """One recorded step of an exam.

    ``probe`` steps carry the scored answer; ``advance``, ``phase``, ``fill``
    and ``correct`` steps drive the session the way the agent's tools would.
    """

    action: t.Literal["probe", "advance", "phase", "fill", "correct"] = "probe"
    vertex: str | None = None
    layer: ProbeLayer = ProbeLayer.Recall
    level: int = 1
    score: int = 1
    confident: bool = False
    question: str = ""
    answer_summary: str = ""
    phase: Phase | None = None


class ReplayScript(BaseModel):
    body: TargetBody = TargetBody.Both
    domains: list[str] = p.Field(default_factory=list)
    depth: str | None = None
    steps: list[ReplayStep] = p.Field(default_factory=list)
    notes: str = ""


@click.group()
def exam() -> None:
    """Inspect vertex queues and replay recorded exams."""
    ...


@exam.command(name="queue")
@click.option("--domain", "domains", multiple=True, help="Restrict to a domain; repeat for several, omit for all")
@click.option("--body", default=None, type=click.EnumType(TargetBody, case_sensitive=False))
@di.inject
def queue(
    domains: tuple[str, ...],
    body: TargetBody | None,
    default_body: TargetBody = di.Provide["config.exam.default_body"],  # noqa: B008
) -> None:
    """Print the vertex traversal order for a new exam."""
    target = body or default_body
    names, _ = build_queue(domains, target)

    table = Table(title=f"Vertex queue: {target.value}, {', '.join(domains) or 'all domains'}")
    table.add_column("#", justify="right")
    table.add_column("Vertex", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Domains")
    table.add_column("Description")
    for i, name in enumerate(names, start=1):
        definition = get_definition(name)
        assert definition is not None
        table.add_row(
            str(i),
            name,
            f"{definition.weight_for(target):.1f}",
            ", ".join(sorted(definition.domains)),
            definition.description,
        )
    console.print(table)
    if not names:
        known = sorted({d for v in CATALOG for d in v.domains})
        console.print(f"[yellow]No vertices matched.[/yellow] Known domains: {', '.join(known)}")


@exam.command(name="replay")
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--analyze", is_flag=True, default=False, help="Run every probe through the background analyzer")
@click.option("--report", "report_path", default=None, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
@di.inject
def replay(
    ct: VivaContainer,
    script: Path,
    analyze: bool,
    report_path: Path | None,
    logging_provider: LoggingProvider = di.Provide["logging"],  # noqa: B008
    default_depth: str = di.Provide["config.exam.default_depth"],  # noqa: B008
    analysis_enabled: bool = di.Provide["config.exam.analysis.enabled"],  # noqa: B008
) -> None:
    """Replay a JSON exam script through a fresh session.

    SCRIPT holds the body, domains and an ordered list of steps. With
    --analyze each probe is also submitted to the background analyzer and
    the resulting context injections are printed after the replay.
    """
    logger = logging_provider.get_logger()
    try:
        recorded = ReplayScript.model_validate_json(script.read_text())
    except p.ValidationError as e:
        raise click.ClickException(f"{script}: {e}") from e

    if analyze and not analysis_enabled:
        raise click.UsageError("background analysis is disabled, set exam.analysis.enabled=true")

    session: ExamSession = ct.exam.session()
    analyzer: BackgroundAnalyzer | None = ct.exam.analyzer() if analyze else None

    async def _replay() -> list[ProbeAnalysis]:
        state = session.start(recorded.domains, recorded.body, recorded.depth or default_depth)
        if analyzer is not None:
            analyzer.reset(state.session_id)

        for i, step in enumerate(recorded.steps, start=1):
            logger.trace("replaying step", extra={"step": i, "action": step.action, "vertex": step.vertex})
            if step.action == "advance":
                session.advance_vertex()
                continue
            if step.action == "phase":
                if step.phase is None:
                    raise click.ClickException(f"step {i}: phase step without a phase")
                session.set_phase(step.phase)
                continue

            vertex = step.vertex or session.current_vertex
            if vertex is None:
                logger.warning(f"step {i}: no vertex to {step.action}, skipping")
                continue
            if step.action == "fill":
                session.mark_filled(vertex)
            elif step.action == "correct":
                session.mark_corrected(vertex)
            else:
                session.record_probe(
                    vertex, step.layer, step.level, step.score, step.confident, step.answer_summary
                )
                vertex_state = session.get_vertex(vertex)
                if analyzer is not None and vertex_state is not None:
                    analyzer.submit(
                        vertex,
                        vertex_state.description,
                        step.layer,
                        step.question,
                        step.answer_summary,
                        step.score,
                        step.confident,
                        body=session.state.body,
                        probe_count=len(session.state.probe_log),
                    )

        if analyzer is None:
            return []
        return await analyzer.drain()

    try:
        analyses = asyncio.run(_replay())
    except ExamError as e:
        raise click.ClickException(str(e)) from e

    _print_vertices(session)
    summary = session.get_session_summary()
    console.print(
        f"[bold]{summary.probed}/{summary.total_vertices}[/bold] probed, "
        f"{summary.gaps} gaps, {summary.strengths} strengths, "
        f"{summary.hypercorrection_targets} hypercorrection targets, "
        f"mean score {summary.mean_score:.1f}, phase {summary.phase.value}"
    )

    if analyzer is not None:
        for analysis in analyses:
            title = f"{analysis.vertex}{' (fallback)' if analysis.fallback else ''}"
            console.print(Panel(analyzer.generate_context_injection(analysis.vertex, analysis), title=title))

    if report_path is not None:
        report = session.build_report(notes=recorded.notes)
        report_path.write_text(viva.lib.json.dumps(report, indent=2))
        logger.info("wrote study report", extra={"path": str(report_path)})


def _print_vertices(session: ExamSession) -> None:
    table = Table(title="Session")
    table.add_column("Vertex", style="cyan")
    table.add_column("Best", justify="right")
    table.add_column("Quadrant")
    table.add_column("Probes", justify="right")
    table.add_column("Layers")
    table.add_column("Complete")
    table.add_column("Filled")
    table.add_column("Corrected")
    for name in session.state.queue:
        v = session.get_vertex(name)
        assert v is not None
        table.add_row(
            name,
            str(v.best_score),
            v.quadrant.value if v.quadrant else "",
            str(v.probe_count),
            ", ".join(layer.value for layer in v.probed_layers),
            "yes" if session.is_complete(name) else "",
            "yes" if v.filled else "",
            "yes" if v.corrected else "",
        )
    console.print(table)
