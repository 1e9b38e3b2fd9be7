"""Past Tense Analyzer - Entry Point

Usage:
    python main.py "I was walking home when it started to rain"
    python main.py --structure "Yesterday I goed to school"
    python main.py --errors "They was playing football"
    python main.py --explain "While I studied, she cooked"
"""

import json
import logging
import os
import sys

from config import Config

LOG_LEVEL = os.getenv('LOG_LEVEL', Config.LOG_LEVEL).upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)

MODES = ('--structure', '--errors', '--explain')


def run(mode: str, text: str) -> dict:
    if mode == '--structure':
        from tense_analyzer.structure_analyzer import StructureAnalyzer, structure_summary
        analyzer = StructureAnalyzer()
        structure = analyzer.analyze(text)
        summary = structure_summary(structure)
        summary['recommendations'] = analyzer.generate_recommendations(structure)
        return summary

    if mode == '--errors':
        from rules.error_detector import ErrorDetector
        detector = ErrorDetector(**Config.get_error_detection_config())
        result = detector.detect_all(text)
        report = result.to_dict()
        report['severity_summary'] = detector.analyze_error_severity(result.errors)
        return report

    if mode == '--explain':
        from context_engine import RecommendationEngine, RecommendationFuser
        engine = RecommendationEngine(fuser=RecommendationFuser(**Config.get_recommendation_config()))
        result = engine.recommend(text)
        return {'recommendation': result.to_dict(), 'explanation': engine.explain(result)}

    from realtime import RealTimeOrchestrator
    with RealTimeOrchestrator(Config) as orchestrator:
        return orchestrator.analyze(text)


def main():
    """Main entry point"""
    args = sys.argv[1:]
    mode = None
    if args and args[0] in MODES:
        mode = args.pop(0)

    if not args:
        print(__doc__)
        return 1

    text = " ".join(args)
    logger.debug(f"Analyzing '{text}' (mode: {mode or 'realtime'})")
    print(json.dumps(run(mode, text), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
