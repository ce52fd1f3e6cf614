#!/usr/bin/env python3
"""
Church Attendance Analyzer (2015-2024)
Line chart of attendance or ranking for selected churches, with a summary
table of current values and growth.
- Default: sample data
- --live: backend (BACKEND_URL) or direct scraping of the ranking source
"""

import argparse
import os
import webbrowser
from datetime import datetime

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from church_rankings import get_year_data, get_years
from church_trends import summarize_church
from config import BACKEND_URL, USE_BACKEND, VIEW_MODES
from ranking_scraper import ScrapingError, build_status_message, refresh_church_data
from sample_data import generate_sample_data

COLORS = ['#8884d8', '#82ca9d', '#ffc658', '#ff7c7c', '#8dd1e1', '#d084d0', '#ffb347']


def filter_churches(churches, search_term):
    """Churches whose name, location or pastor contains the search term"""
    term = (search_term or '').lower()
    if not term:
        return list(churches)
    return [
        church for church in churches
        if term in (church.get('name') or '').lower()
        or term in (church.get('location') or '').lower()
        or term in (church.get('pastor') or '').lower()
    ]


def toggle_selection(selected, church_name):
    if church_name in selected:
        return [name for name in selected if name != church_name]
    return selected + [church_name]


def top_churches(churches, count=5):
    """Names of the best-ranked churches in the latest year"""
    years = get_years(churches)
    if not years:
        return []
    latest_year = years[-1]

    ranked = []
    for church in churches:
        data_point = get_year_data(church, latest_year)
        if data_point and data_point.get('ranking') is not None:
            ranked.append((data_point['ranking'], church['name']))

    return [name for _, name in sorted(ranked)[:count]]


def build_chart_data(churches, selected, view_mode='attendance', years=None):
    """One row per year, one column per selected church"""
    if not selected:
        return pd.DataFrame()

    value_key = 'attendance' if view_mode == 'attendance' else 'ranking'
    years = years or get_years(churches)
    by_name = {church['name']: church for church in churches}

    chart_df = pd.DataFrame(index=pd.Index(years, name='year'))
    for name in selected:
        church = by_name.get(name)
        if church is None:
            continue
        values = {d['year']: d.get(value_key) for d in church['data']}
        chart_df[name] = [values.get(year) for year in years]

    return chart_df.astype(float)


def create_dashboard(churches, selected, view_mode='attendance', status_message=None):
    """Trend chart on top, summary statistics table below"""
    if view_mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode: {view_mode!r}")

    print(f"\n📊 Creating {view_mode} dashboard for {len(selected)} churches...")

    chart_df = build_chart_data(churches, selected, view_mode)
    is_attendance = view_mode == 'attendance'
    metric_label = 'Attendance' if is_attendance else 'Ranking'

    fig = make_subplots(
        rows=2, cols=1,
        row_heights=[0.65, 0.35],
        vertical_spacing=0.08,
        specs=[[{"type": "xy"}], [{"type": "table"}]],
        subplot_titles=(
            f"{metric_label} Trends ({len(selected)} churches selected)",
            "Summary Statistics"
        )
    )

    hovertemplate = ('<b>%{fullData.name}</b><br>Year: %{x}<br>%{y:,.0f} attendees<extra></extra>'
                     if is_attendance else
                     '<b>%{fullData.name}</b><br>Year: %{x}<br>Rank #%{y}<extra></extra>')

    for index, name in enumerate(chart_df.columns):
        fig.add_trace(
            go.Scatter(
                x=chart_df.index,
                y=chart_df[name],
                name=name,
                mode='lines+markers',
                line=dict(color=COLORS[index % len(COLORS)], width=2, shape='spline'),
                marker=dict(size=8),
                connectgaps=False,
                hovertemplate=hovertemplate
            ),
            row=1, col=1
        )

    # Summary table
    by_name = {church['name']: church for church in churches}
    rows = []
    for name in selected:
        church = by_name.get(name)
        if not church or not church.get('data'):
            continue
        summary = summarize_church(church, view_mode)
        arrow = {'up': '▲', 'down': '▼'}.get(summary['direction'], '')
        rows.append({
            'Church': church['name'],
            'Location': church.get('location', ''),
            'Pastor': church.get('pastor', ''),
            f'Current {view_mode}': summary['current_label'],
            'Growth': summary['growth_label'] + (' growth' if is_attendance else ' rank change'),
            'Trend': arrow,
            '_growth': summary['growth'],
        })
    summary_df = pd.DataFrame(rows)

    if len(summary_df) > 0:
        growth_colors = ['#16a34a' if (g is not None and g > 0) else '#dc2626' for g in summary_df['_growth']]
        columns = [c for c in summary_df.columns if not c.startswith('_')]
        cell_colors = [['#f8f9fa'] * len(summary_df) for _ in columns]
        font_colors = [['#2c3e50'] * len(summary_df) for _ in columns]
        font_colors[columns.index('Growth')] = growth_colors
        font_colors[columns.index('Trend')] = growth_colors

        fig.add_trace(
            go.Table(
                header=dict(values=[f"<b>{c}</b>" for c in columns],
                            fill_color='#1e40af', font=dict(color='white', size=13), align='left'),
                cells=dict(values=[summary_df[c].tolist() for c in columns],
                           fill_color=cell_colors, font=dict(color=font_colors, size=12), align='left')
            ),
            row=2, col=1
        )

    title_text = '<b>⛪ Church Attendance Analyzer</b>'
    if chart_df.index.size:
        title_text += f" ({chart_df.index.min()}-{chart_df.index.max()})"
    if status_message:
        title_text += f"<br><span style='font-size:14px;'>{status_message}</span>"

    fig.update_layout(
        title={'text': title_text, 'x': 0.5, 'xanchor': 'center', 'font': {'size': 24, 'color': '#2c3e50'}},
        height=1100,
        width=1400,
        plot_bgcolor='white',
        paper_bgcolor='white',
        font=dict(family="Arial, sans-serif", size=12, color='black'),
        margin=dict(l=80, r=80, t=140, b=60),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=12))
    )

    fig.update_xaxes(title_text="Year", dtick=1, showgrid=False, row=1, col=1)
    fig.update_yaxes(title_text=metric_label, showgrid=True, gridcolor='lightgray', row=1, col=1)
    if not is_attendance:
        # Rank #1 at the top
        fig.update_yaxes(autorange='reversed', row=1, col=1)

    return fig


def save_dashboard(fig, output_dir='outputs', png=False):
    """Write the dashboard HTML (and optionally PNG); returns the HTML path"""
    os.makedirs(output_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    html_path = os.path.join(output_dir, f"church_attendance_dashboard_{timestamp}.html")
    fig.write_html(html_path)
    print(f"✅ Interactive HTML saved: {html_path}")

    if png:
        png_path = os.path.join(output_dir, f"church_attendance_dashboard_{timestamp}.png")
        fig.write_image(png_path, width=1400, height=1100, scale=2)
        print(f"✅ PNG saved: {png_path}")

    return html_path


def load_churches(live=False, backend_url=BACKEND_URL, use_backend=USE_BACKEND, seed=None):
    """(churches, status message) - falls back to sample data when a live refresh fails"""
    if live:
        source = 'backend' if use_backend else 'direct scraping'
        try:
            result = refresh_church_data(use_backend=use_backend, backend_url=backend_url)
            return result['consolidatedData'], build_status_message(result, source)
        except ScrapingError as e:
            print(f"❌ Error: {e}")
            print("⚠️ Falling back to sample data")
            churches = generate_sample_data(seed=seed)
            return churches, f"❌ Error: {e} (showing sample data)"

    churches = generate_sample_data(seed=seed)
    return churches, 'Sample data loaded. Configure BACKEND_URL and use --live for real data.'


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Church attendance and ranking dashboard')
    parser.add_argument('--live', action='store_true', help='Load live data instead of sample data')
    parser.add_argument('--backend-url', default=BACKEND_URL, help='Backend base URL (enables backend mode)')
    parser.add_argument('--view-mode', choices=VIEW_MODES, default='attendance')
    parser.add_argument('--search', default='', help='Only churches whose name, location or pastor matches')
    parser.add_argument('--select', action='append', default=[], metavar='NAME',
                        help='Church to chart (repeatable)')
    parser.add_argument('--top', type=int, default=5, help='Chart the top N churches when nothing is selected')
    parser.add_argument('--output-dir', default='outputs')
    parser.add_argument('--png', action='store_true', help='Also save a PNG (needs kaleido)')
    parser.add_argument('--no-open', action='store_true', help="Don't open the dashboard in a browser")
    parser.add_argument('--seed', type=int, default=None, help='Random seed for sample data')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    print("⛪ CHURCH ATTENDANCE ANALYZER")
    print("=" * 50)

    # A backend URL on the command line switches backend mode on
    use_backend = USE_BACKEND if args.backend_url == BACKEND_URL else bool(args.backend_url)
    churches, status_message = load_churches(args.live, args.backend_url, use_backend, args.seed)
    print(status_message)

    filtered = filter_churches(churches, args.search)
    print(f"🔍 {len(filtered)} of {len(churches)} churches match '{args.search}'" if args.search
          else f"📋 {len(churches)} churches loaded")

    selected = []
    filtered_names = {church['name'] for church in filtered}
    for name in args.select:
        if name not in filtered_names:
            print(f"⚠️ '{name}' not found, skipping")
        elif name not in selected:
            selected = toggle_selection(selected, name)
    if not selected:
        selected = top_churches(filtered, args.top)

    if not selected:
        print("❌ No churches to chart")
        return 1

    fig = create_dashboard(churches, selected, args.view_mode, status_message)
    html_path = save_dashboard(fig, args.output_dir, png=args.png)

    if not args.no_open:
        try:
            webbrowser.open('file://' + os.path.abspath(html_path))
            print("🌐 Opening dashboard in browser...")
        except Exception as e:
            print(f"⚠️ Could not auto-open dashboard: {e}")

    print("\n📋 SUMMARY")
    print("=" * 50)
    by_name = {church['name']: church for church in churches}
    for name in selected:
        summary = summarize_church(by_name[name], args.view_mode)
        print(f"   {name}: {summary['current_label']} ({summary['growth_label']})")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
