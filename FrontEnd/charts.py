from FrontEnd.styles.design_tokens import COLORS, PROJECT_PALETTE


def project_colors(projects):
	return {name: PROJECT_PALETTE[i % len(PROJECT_PALETTE)] for i, name in enumerate(projects)}

def draw_rollup(figure, rollup, title=None):
	"""Draw a stacked bar chart of focus hours per project onto a matplotlib Figure.

	Returns the Axes so callers (and tests) can inspect what was drawn.
	"""
	figure.clear()
	# Transparent to blend with app
	figure.patch.set_alpha(0.0)

	ax = figure.add_subplot(111)
	ax.set_facecolor(COLORS['chart_bg'])

	x = list(range(len(rollup.labels)))
	bottom = [0.0] * len(x)
	colors = project_colors(rollup.series)
	for project, minutes in rollup.series.items():
		hours = [m / 60 for m in minutes]
		ax.bar(x, hours, bottom=bottom, label=project, color=colors[project],
			edgecolor=COLORS['chart_edge'], linewidth=0.8, alpha=0.9)
		bottom = [b + h for b, h in zip(bottom, hours)]

	# Add value labels on top of stacks
	for i, value in enumerate(bottom):
		if value > 0:
			ax.text(i, value + 0.02, f'{value:.1f}h', ha='center', va='bottom',
				fontsize=8, fontweight='600', color=COLORS['text_strong'])

	ax.set_xticks(x)
	ax.set_xticklabels(rollup.labels)
	ax.set_ylabel("Focus Hours", fontsize=11, fontweight='600', color=COLORS['text_strong'])
	ax.set_xlabel(rollup.xlabel, fontsize=11, fontweight='600', color=COLORS['text_strong'])
	ax.set_title(title or f"Focus Time by {rollup.xlabel}", fontsize=13, fontweight='bold',
		color=COLORS['text_strong'])
	ax.set_ylim(bottom=0)
	ax.grid(True, axis='y', alpha=0.25, linestyle='--', linewidth=0.8, color=COLORS['border'])
	ax.set_axisbelow(True)
	for spine in ['top', 'right']:
		ax.spines[spine].set_visible(False)
	if len(x) > 15:
		ax.tick_params(axis='x', rotation=45, labelsize=8)
	if rollup.series:
		ax.legend(loc='upper left', fontsize=8, frameon=False)
	figure.tight_layout()
	return ax
