from .analysis_pipeline import AnalysisResult, analyze_vcf, explain_reports, run_analysis_pipeline

__all__ = ["AnalysisResult", "analyze_vcf", "explain_reports", "run_analysis_pipeline"]
