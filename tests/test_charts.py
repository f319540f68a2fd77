import datetime
from datetime import timezone

from matplotlib.figure import Figure

from BackEnd.core.models import Phase, Session
from BackEnd.services.report_service import project_rollup
from FrontEnd.charts import draw_rollup, project_colors
from FrontEnd.styles.design_tokens import PROJECT_PALETTE

TODAY = datetime.date(2024, 3, 6)


def work(day, project, minutes=30):
    start = datetime.datetime(2024, 3, day, 9, tzinfo=timezone.utc)
    return Session(phase=Phase.WORK, start_time=start, end_time=start + datetime.timedelta(minutes=minutes),
        duration_minutes=minutes, project_name=project)


def test_project_colors_cycle():
    names = [f"p{i}" for i in range(len(PROJECT_PALETTE) + 1)]
    colors = project_colors(names)
    assert colors["p0"] == PROJECT_PALETTE[0]
    assert colors[names[-1]] == PROJECT_PALETTE[0]


def test_draw_rollup_stacks_projects():
    rollup = project_rollup([work(4, "Gym"), work(4, "Thesis", 90), work(6, "Thesis")], "week", TODAY,
        tz=timezone.utc)
    figure = Figure()
    ax = draw_rollup(figure, rollup)

    # one bar per day per project
    assert len(ax.patches) == 14
    assert [t.get_text() for t in ax.get_xticklabels()] == rollup.labels
    assert ax.get_ylabel() == "Focus Hours"
    assert ax.get_title() == "Focus Time by Day of Week"
    labels = sorted(t.get_text() for t in ax.texts)
    assert labels == ["0.5h", "2.0h"]
    assert [t.get_text() for t in ax.get_legend().get_texts()] == ["Gym", "Thesis"]


def test_draw_rollup_empty():
    rollup = project_rollup([], "day", TODAY, tz=timezone.utc)
    ax = draw_rollup(Figure(), rollup, title="Today")
    assert len(ax.patches) == 0
    assert ax.get_legend() is None
    assert ax.get_title() == "Today"
