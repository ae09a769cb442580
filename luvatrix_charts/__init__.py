from luvatrix_charts.bar import BarChart, BarGroup, bar_layout
from luvatrix_charts.chart import Chart
from luvatrix_charts.charts3d import Line3DChart, Scatter3DChart, Surface3DChart
from luvatrix_charts.colormap import Colormap, LogNorm, Normalize, SymLogNorm
from luvatrix_charts.config import ChartConfig, Margins, load_chart_config
from luvatrix_charts.contour import ContourChart, ContourResult, trace
from luvatrix_charts.errors import ChartDataError
from luvatrix_charts.financial import CandlestickChart, WaterfallChart, waterfall_layout
from luvatrix_charts.gauge import FunnelChart, GaugeChart, Threshold
from luvatrix_charts.geometry import DrawList, LineStyle, MarkerStyle, PlotArea, Rect
from luvatrix_charts.heatmap import HeatmapChart
from luvatrix_charts.hexbin import HexbinChart, calculate_bins
from luvatrix_charts.histogram import BoxPlotChart, HistogramChart, compute_bins
from luvatrix_charts.line import LegendPosition, LineChart
from luvatrix_charts.pie import DonutChart, PieChart
from luvatrix_charts.polar import PolarChart, RadarChart
from luvatrix_charts.projection import View3D
from luvatrix_charts.records import Candle, FunnelStage, HexbinPoint, PieSlice, Point3D, TreemapNode, WaterfallEntry
from luvatrix_charts.scales import AxisTransform, ScaleType
from luvatrix_charts.series import Line3DSeries, PolarSeries, RadarSeries, Series, StepStyle
from luvatrix_charts.stack import StackChart, StackOffset, StackOrder, StackSeries, StreamgraphChart, stack_layout
from luvatrix_charts.stem import StemChart, ViolinChart, ViolinItem
from luvatrix_charts.treemap import TreemapChart, treemap_layout

__all__ = [
    "AxisTransform",
    "BarChart",
    "BarGroup",
    "BoxPlotChart",
    "Candle",
    "CandlestickChart",
    "Chart",
    "ChartConfig",
    "ChartDataError",
    "Colormap",
    "ContourChart",
    "ContourResult",
    "DonutChart",
    "DrawList",
    "FunnelChart",
    "FunnelStage",
    "GaugeChart",
    "HeatmapChart",
    "HexbinChart",
    "HexbinPoint",
    "HistogramChart",
    "LegendPosition",
    "Line3DChart",
    "Line3DSeries",
    "LineChart",
    "LineStyle",
    "LogNorm",
    "Margins",
    "MarkerStyle",
    "Normalize",
    "PieChart",
    "PieSlice",
    "PlotArea",
    "Point3D",
    "PolarChart",
    "PolarSeries",
    "RadarChart",
    "RadarSeries",
    "Rect",
    "ScaleType",
    "Scatter3DChart",
    "Series",
    "StackChart",
    "StackOffset",
    "StackOrder",
    "StackSeries",
    "StemChart",
    "StreamgraphChart",
    "StepStyle",
    "Surface3DChart",
    "SymLogNorm",
    "Threshold",
    "TreemapChart",
    "TreemapNode",
    "View3D",
    "ViolinChart",
    "ViolinItem",
    "WaterfallChart",
    "WaterfallEntry",
    "bar_layout",
    "calculate_bins",
    "compute_bins",
    "load_chart_config",
    "stack_layout",
    "trace",
    "treemap_layout",
    "waterfall_layout",
]
