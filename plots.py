"""Plotly charts for ranked results."""

import logging
import os
import tempfile

import pandas as pd
import plotly.graph_objects as go

from pipeline_config import PLOT_PATH
from s3_io import upload_to_s3

logger = logging.getLogger(__name__)

COLORS = ['#1f77b4', '#2ca02c', '#d62728', '#9467bd', '#8c564b',
          '#e377c2', '#7f7f7f', '#bcbd22', '#17becf', '#ff7f0e']


def ranked_bar_chart(ranked_df: pd.DataFrame, label_col: str, value_col: str, title: str) -> go.Figure:
    """Bar chart of one group's ranked items, in rank order."""
    fig = go.Figure([go.Bar(
        x=ranked_df[label_col],
        y=ranked_df[value_col],
        text=ranked_df[value_col].round(2),
        textposition='auto',
        marker_color=[COLORS[i % len(COLORS)] for i in range(len(ranked_df))],
        marker_line_color='black',
        marker_line_width=1.5,
        opacity=0.85
    )])
    fig.update_layout(
        title=title,
        xaxis_title=label_col.replace("_", " ").title(),
        yaxis_title=value_col.replace("_", " ").title(),
        title_x=0.5,
        height=600,
        width=800,
        font=dict(family="Arial, sans-serif", size=16, color="black"),
        plot_bgcolor='rgba(240, 240, 240, 0.95)',
        paper_bgcolor='white',
        xaxis=dict(tickangle=45, gridcolor='lightgray'),
        yaxis=dict(gridcolor='lightgray'),
        showlegend=False,
        margin=dict(l=50, r=50, t=100, b=100)
    )
    return fig


def save_chart(fig: go.Figure, name: str, plot_path: str = PLOT_PATH):
    """Write the chart as PNG and HTML, then upload both to S3."""
    tmp_dir = tempfile.gettempdir()
    png_path = os.path.join(tmp_dir, f"{name}.png")
    html_path = os.path.join(tmp_dir, f"{name}.html")
    fig.write_image(png_path, format="png", scale=2)
    fig.write_html(html_path)
    upload_to_s3(png_path, f"{plot_path}{name}.png")
    upload_to_s3(html_path, f"{plot_path}{name}.html")
