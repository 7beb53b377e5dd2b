# KPI Report and Chart Export Module.

from pathlib import Path
from typing import Optional, List, Dict, Any
from datetime import datetime

import pandas as pd
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for production
import matplotlib.pyplot as plt
import seaborn as sns

from tourism_analytics.config.config import viz_config, PLOTS_DIR, REPORTS_DIR
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)

plt.style.use(viz_config.style)
sns.set_palette(viz_config.color_palette)


class KPIReporter:
    """
    Formats the overview KPIs as a plain-text report for non-technical
    stakeholders.
    """
    
    def generate_kpi_report(
        self,
        overview: Dict[str, Any],
        spending: Optional[Dict[str, Any]] = None,
        opportunities: Optional[List[Dict[str, Any]]] = None
    ) -> str:
        report_lines = [
            "=" * 70,
            "KATHMANDU VALLEY TOURISM - KEY PERFORMANCE INDICATORS",
            "=" * 70,
            "",
            "📊 DATASET",
            "-" * 40,
            f"  Tourists:          {overview['total_tourists']:,}",
            f"  Attractions:       {overview['total_attractions']:,}",
            f"  Accommodations:    {overview['total_accommodations']:,}",
            f"  Attraction Visits: {overview['total_visits']:,}",
            "",
        ]
        
        if overview['avg_spending'] is not None:
            report_lines.extend([
                "💰 SPENDING & EXPERIENCE",
                "-" * 40,
                f"  Total Revenue:     NPR {overview['total_revenue']:,}",
                f"  Average Spending:  NPR {overview['avg_spending']:,}",
                f"  Average Stay:      {overview['avg_duration']} days",
                f"  Satisfaction:      {overview['avg_satisfaction']} / 10",
                f"  Recommend Rate:    {overview['recommend_rate']}%",
                f"  Guide Usage:       {overview['guide_usage_rate']}%",
                "",
            ])
        
        if overview['top_nationalities']:
            report_lines.extend(["🌍 TOP SOURCE MARKETS", "-" * 40])
            for i, entry in enumerate(overview['top_nationalities'][:5], 1):
                report_lines.append(f"  {i}. {entry['item']}: {entry['count']:,} ({entry['percentage']}%)")
            report_lines.append("")
        
        if spending:
            report_lines.extend(["🧾 AVERAGE SPENDING BREAKDOWN", "-" * 40])
            for component, value in spending['breakdown'].items():
                if value is not None:
                    share = spending['percentages'][component]
                    report_lines.append(f"  {component.title():<15} NPR {value:>10,}  ({share}%)")
            report_lines.append("")
        
        if opportunities:
            report_lines.extend(["🚀 MARKET OPPORTUNITIES", "-" * 40])
            for opportunity in opportunities:
                subject = opportunity.get('nationality') or opportunity.get('season')
                report_lines.append(f"  {opportunity['type']}: {subject}")
                report_lines.append(f"    -> {opportunity['recommendation']}")
            report_lines.append("")
        
        report_lines.extend([
            "=" * 70,
            f"Report generated on: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "=" * 70,
        ])
        
        logger.info("Generated KPI report")
        return "\n".join(report_lines)
    
    def save_kpi_report(self, report: str, filename: str = None, report_dir: Path = None) -> Path:
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"kpi_report_{timestamp}.txt"
        
        filepath = (report_dir or REPORTS_DIR) / filename
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(report)
        
        logger.info(f"Saved KPI report to: {filepath}")
        return filepath


class ChartExporter:
    """Renders analytics results to PNG charts."""
    
    def __init__(self, save_plots: bool = True, plot_dir: Path = None):
        self.save_plots = save_plots
        self.plot_dir = plot_dir or PLOTS_DIR
        self.plot_dir.mkdir(parents=True, exist_ok=True)
        self.run_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        logger.info(f"ChartExporter initialized. Plots will be saved to: {self.plot_dir}")
    
    def _save_figure(self, fig: plt.Figure, name: str) -> Optional[Path]:
        if self.save_plots:
            filename = f"{name}_{self.run_timestamp}.{viz_config.save_format}"
            filepath = self.plot_dir / filename
            fig.savefig(filepath, dpi=viz_config.save_dpi, bbox_inches='tight',
                        facecolor='white', edgecolor='none')
            logger.info(f"Saved plot: {filepath}")
            plt.close(fig)
            return filepath
        plt.close(fig)
        return None
    
    def plot_season_distribution(self, overview: Dict[str, Any]) -> Optional[Path]:
        if not overview['season_distribution']:
            logger.warning("No season distribution to plot")
            return None
        
        df = pd.DataFrame(overview['season_distribution'])
        fig, ax = plt.subplots(figsize=viz_config.default_figsize)
        sns.barplot(data=df, x='season', y='count', ax=ax)
        for i, row in df.iterrows():
            ax.annotate(f"{row['percentage']}%", xy=(i, row['count']),
                        ha='center', va='bottom', fontsize=10)
        
        ax.set_xlabel('Season', fontsize=12)
        ax.set_ylabel('Tourists', fontsize=12)
        ax.set_title('Tourist Arrivals by Season', fontsize=14, fontweight='bold')
        plt.tight_layout()
        return self._save_figure(fig, 'season_distribution')
    
    def plot_spending_breakdown(self, spending: Dict[str, Any]) -> Optional[Path]:
        rows = [
            {'component': name.title(), 'avg_npr': value}
            for name, value in spending['breakdown'].items() if value is not None
        ]
        if not rows:
            logger.warning("No spending breakdown to plot")
            return None
        
        df = pd.DataFrame(rows).sort_values('avg_npr', ascending=False)
        fig, ax = plt.subplots(figsize=viz_config.default_figsize)
        sns.barplot(data=df, x='avg_npr', y='component', orient='h', ax=ax)
        ax.set_xlabel('Average Spend (NPR)', fontsize=12)
        ax.set_ylabel('')
        ax.set_title('Average Spending by Component', fontsize=14, fontweight='bold')
        plt.tight_layout()
        return self._save_figure(fig, 'spending_breakdown')
    
    def plot_cluster_sizes(self, segmentation: Dict[str, Any]) -> Optional[Path]:
        if not segmentation['clusters']:
            logger.warning("No clusters to plot")
            return None
        
        df = pd.DataFrame([
            {'segment': f"{c['cluster_id']}: {c['name']}", 'size': c['size'],
             'avg_spending': c['characteristics']['avg_spending']}
            for c in segmentation['clusters']
        ])
        fig, axes = plt.subplots(1, 2, figsize=viz_config.large_figsize)
        sns.barplot(data=df, x='size', y='segment', orient='h', ax=axes[0])
        axes[0].set_title('Segment Size', fontsize=12, fontweight='bold')
        sns.barplot(data=df, x='avg_spending', y='segment', orient='h', ax=axes[1])
        axes[1].set_title('Average Spending (NPR)', fontsize=12, fontweight='bold')
        axes[1].set_ylabel('')
        fig.suptitle('Customer Segments (K-means)', fontsize=14, fontweight='bold')
        plt.tight_layout()
        return self._save_figure(fig, 'customer_segments')
    
    def plot_time_series(self, time_series: List[Dict[str, Any]]) -> Optional[Path]:
        if not time_series:
            logger.warning("No time series to plot")
            return None
        
        df = pd.DataFrame(time_series)
        fig, ax = plt.subplots(figsize=viz_config.large_figsize)
        ax.plot(df['month'], df['visitors'], 'b-o', linewidth=2, markersize=6, label='Visitors')
        ax.set_xlabel('Arrival Month', fontsize=12)
        ax.set_ylabel('Visitors', fontsize=12)
        ax.tick_params(axis='x', rotation=45)
        
        ax2 = ax.twinx()
        ax2.plot(df['month'], df['avg_satisfaction'], 'r--s', linewidth=1.5,
                 markersize=5, label='Avg Satisfaction')
        ax2.set_ylabel('Average Satisfaction', fontsize=12)
        
        ax.set_title('Monthly Arrivals and Satisfaction', fontsize=14, fontweight='bold')
        fig.legend(loc='upper left', bbox_to_anchor=(0.08, 0.92), fontsize=10)
        plt.tight_layout()
        return self._save_figure(fig, 'monthly_time_series')
