# Design tokens for the Pomodoro UI

COLORS = {
	'background': '#F7F9FC',
	'surface': '#E7F0FF',
	'primary': '#5EA1FF',
	'text': '#3C4450',
	'text_strong': '#133A62',
	'border': '#DCE3ED',
	'footer_bg': '#E7F0FF',
	'footer_text': '#133A62',
	'chart_bg': '#F7FAFC',
	'chart_edge': '#7B9BB0',
	'dark_background': '#1F2430',
	'dark_text': '#E6EAF0',
}

# Stacked-chart colours, assigned to projects in sorted order
PROJECT_PALETTE = [
	'#8FAEC4', '#F4A261', '#2A9D8F', '#E76F51', '#9B8AC4', '#E9C46A', '#6D9DC5', '#B5838D',
]

def phase_color(config, phase):
	"""The user's colour for a phase value ('pomodoro', 'short_break', 'long_break')."""
	return {
		'pomodoro': config.work_color,
		'short_break': config.short_break_color,
		'long_break': config.long_break_color,
	}[phase]
