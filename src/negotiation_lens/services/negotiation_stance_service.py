"""
Negotiation Stance Service

Single dominant negotiation emotion/intent per utterance and the
emotion x intent playbook of recommended moves.
"""

import logging
from typing import Dict, List, Tuple

from negotiation_lens.models import (
    NegotiationEmotion,
    NegotiationIntent,
    NegotiationStance,
    PlaybookCategory,
    PlaybookMove,
    PlaybookResult,
)

logger = logging.getLogger(__name__)


def _move(strategy: str, confidence: float, rationale: str, category: str) -> PlaybookMove:
    return PlaybookMove(
        strategy=strategy,
        confidence=confidence,
        rationale=rationale,
        category=PlaybookCategory(category),
    )


class NegotiationStanceClassifier:
    """
    협상 태도 분류기

    Picks the first label with the highest keyword-hit count; confidence is
    min(0.97, 0.55 + 0.12 * hits) with fallbacks Neutral 0.65 / Negotiating 0.60.
    """

    EMOTION_PATTERNS: Dict[NegotiationEmotion, List[str]] = {
        NegotiationEmotion.FRUSTRATED: [
            "frustrated", "annoyed", "tired", "sick of", "fed up", "unacceptable",
            "ridiculous", "absurd", "impossible", "keep saying", "again and again",
            "not listening", "waste", "pointless",
        ],
        NegotiationEmotion.HOSTILE: [
            "threat", "warn", "demand", "ultimatum", "or else", "consequences",
            "legal action", "lawsuit", "force", "compel", "insist", "refuse", "never",
            "absolutely not", "out of question",
        ],
        NegotiationEmotion.CONFIDENT: [
            "certain", "confident", "sure", "guarantee", "proven", "track record",
            "expertise", "experience", "clearly", "obviously", "without doubt",
            "definitely", "absolutely", "strong position",
        ],
        NegotiationEmotion.CURIOUS: [
            "wonder", "curious", "interested", "tell me", "explain", "how does", "what if",
            "could you", "would you", "can you", "question", "understand", "clarify",
            "elaborate", "more about",
        ],
        NegotiationEmotion.ANXIOUS: [
            "worried", "concern", "afraid", "fear", "uncertain", "unsure", "risk", "might",
            "could go wrong", "not sure", "hesitant", "nervous", "doubt", "maybe", "perhaps",
        ],
        NegotiationEmotion.OPTIMISTIC: [
            "hope", "opportunity", "potential", "exciting", "promising", "forward",
            "progress", "improve", "better", "positive", "benefit", "advantage", "great",
            "excellent", "wonderful",
        ],
    }

    INTENT_PATTERNS: Dict[NegotiationIntent, List[str]] = {
        NegotiationIntent.DEMANDING: [
            "must", "require", "need", "demand", "expect", "insist", "non-negotiable",
            "bottom line", "minimum", "at least", "no less than", "final offer",
            "take it or leave",
        ],
        NegotiationIntent.CONCEDING: [
            "agree", "accept", "okay", "fine", "alright", "willing", "can do", "possible",
            "consider", "flexible", "compromise", "meet halfway", "adjust", "accommodate",
            "understand your point",
        ],
        NegotiationIntent.PROBING: [
            "what about", "how about", "what if", "suppose", "hypothetically", "scenario",
            "option", "alternative", "possibility", "explore", "consider", "think about",
            "what would", "how would",
        ],
        NegotiationIntent.AGREEING: [
            "yes", "agreed", "deal", "perfect", "exactly", "precisely", "that works",
            "sounds good", "great", "excellent", "we have a deal", "let's proceed",
            "move forward", "finalize",
        ],
        NegotiationIntent.DEFLECTING: [
            "however", "but", "on the other hand", "actually", "in fact", "let me clarify",
            "what i meant", "misunderstanding", "not exactly", "that's not", "redirect",
            "different angle",
        ],
        NegotiationIntent.ASSERTING: [
            "believe", "position", "stance", "view", "perspective", "argument", "point",
            "case", "evidence", "data", "fact", "research", "study", "proven", "demonstrate",
        ],
        NegotiationIntent.NEGOTIATING: [
            "offer", "propose", "suggest", "counter", "terms", "conditions", "deal",
            "arrangement", "structure", "package", "bundle", "include", "exclude", "modify",
        ],
    }

    PLAYBOOK: Dict[Tuple[NegotiationEmotion, NegotiationIntent], List[PlaybookMove]] = {
        (NegotiationEmotion.HOSTILE, NegotiationIntent.DEMANDING): [
            _move("De-escalate Tension", 0.91, "Hostile tone with demands requires immediate emotional de-escalation before substantive progress.", "de-escalate"),
            _move("Acknowledge Concerns", 0.85, "Validating the other party's position reduces defensiveness and opens dialogue.", "build-trust"),
            _move("Introduce Neutral Anchor", 0.72, "Shifting focus to objective criteria removes personal tension from the negotiation.", "anchor"),
        ],
        (NegotiationEmotion.FRUSTRATED, NegotiationIntent.DEMANDING): [
            _move("Empathetic Reframe", 0.88, "Frustration signals unmet needs; reframing around shared goals can reset the dynamic.", "reframe"),
            _move("Offer Partial Concession", 0.79, "A small concession demonstrates good faith and can break the impasse.", "advance"),
            _move("Request Clarification", 0.74, "Probing for underlying interests behind demands reveals negotiable positions.", "probe"),
        ],
        (NegotiationEmotion.CONFIDENT, NegotiationIntent.ASSERTING): [
            _move("Counter-Anchor", 0.87, "Confident assertions require a strong counter-position to establish negotiation range.", "anchor"),
            _move("Probe for Flexibility", 0.81, "Testing the boundaries of confident positions often reveals hidden flexibility.", "probe"),
            _move("Build on Common Ground", 0.76, "Identifying shared interests with a confident counterpart accelerates agreement.", "build-trust"),
        ],
        (NegotiationEmotion.CURIOUS, NegotiationIntent.PROBING): [
            _move("Expand Information Sharing", 0.89, "Curiosity signals openness; sharing strategic information builds reciprocal trust.", "build-trust"),
            _move("Introduce New Options", 0.83, "A curious counterpart is receptive to creative solutions and package deals.", "advance"),
            _move("Reframe Value Proposition", 0.77, "Probing questions indicate evaluation; reframing value can shift the decision calculus.", "reframe"),
        ],
        (NegotiationEmotion.NEUTRAL, NegotiationIntent.NEGOTIATING): [
            _move("Establish Anchor Point", 0.84, "Neutral negotiating stance is ideal for setting a strong initial anchor position.", "anchor"),
            _move("Map Interests", 0.80, "Neutral tone allows for systematic exploration of underlying interests and priorities.", "probe"),
            _move("Propose Package Deal", 0.75, "Bundling multiple issues creates value-creating trade-offs in neutral negotiations.", "advance"),
            _move("Build Rapport", 0.70, "Investing in relationship quality during neutral phases pays dividends in difficult moments.", "build-trust"),
        ],
        (NegotiationEmotion.ANXIOUS, NegotiationIntent.DEFLECTING): [
            _move("Reduce Uncertainty", 0.90, "Anxiety-driven deflection responds to clear, structured proposals that minimize ambiguity.", "advance"),
            _move("Provide Reassurance", 0.85, "Addressing specific concerns directly reduces anxiety and enables forward progress.", "build-trust"),
            _move("Simplify the Ask", 0.78, "Breaking complex demands into smaller steps reduces cognitive load and resistance.", "reframe"),
        ],
        (NegotiationEmotion.OPTIMISTIC, NegotiationIntent.AGREEING): [
            _move("Advance to Close", 0.92, "Optimistic agreement signals readiness; move decisively toward commitment.", "advance"),
            _move("Lock in Key Terms", 0.87, "Secure specific agreements while positive momentum is high.", "anchor"),
            _move("Expand Scope", 0.75, "Positive disposition creates opportunity to introduce additional value-adding elements.", "advance"),
        ],
    }

    DEFAULT_MOVES: List[PlaybookMove] = [
        _move("Active Listening", 0.78, "Demonstrating attentive listening builds trust and surfaces hidden information.", "build-trust"),
        _move("Clarify Positions", 0.74, "Ensuring mutual understanding of stated positions prevents costly misalignments.", "probe"),
        _move("Identify BATNA", 0.71, "Understanding best alternatives strengthens your negotiating position and walk-away point.", "anchor"),
    ]

    REBUILD_TRUST = _move(
        "Rebuild Trust Foundation",
        0.88,
        "Low trust levels require explicit trust-building actions before substantive progress.",
        "build-trust",
    )

    CONFIDENCE_CAP = 0.97
    LOW_TRUST = 0.4
    MAX_MOVES = 4

    def analyze(self, text: str) -> NegotiationStance:
        """
        Classify the dominant negotiation emotion and intent

        Args:
            text: Utterance text

        Returns:
            NegotiationStance
        """
        lower = (text or "").lower()
        emotion, emotion_hits = self._dominant(lower, self.EMOTION_PATTERNS, NegotiationEmotion.NEUTRAL)
        intent, intent_hits = self._dominant(lower, self.INTENT_PATTERNS, NegotiationIntent.NEGOTIATING)

        return NegotiationStance(
            emotion=emotion,
            emotion_confidence=self._confidence(emotion_hits, 0.65),
            intent=intent,
            intent_confidence=self._confidence(intent_hits, 0.60),
        )

    def playbook(
        self,
        emotion: NegotiationEmotion,
        intent: NegotiationIntent,
        trust_level: float,
        persuasion_level: float,
    ) -> List[PlaybookMove]:
        """
        Recommend playbook moves for a stance

        Args:
            emotion: Negotiation emotion
            intent: Negotiation intent
            trust_level: Trust (0 ~ 100)
            persuasion_level: Persuasion (0 ~ 100)

        Returns:
            Up to 4 moves, confidence scaled by trust and persuasion
        """
        trust = max(0.0, min(100.0, trust_level)) / 100.0
        persuasion = max(0.0, min(100.0, persuasion_level)) / 100.0
        base_moves = self.PLAYBOOK.get((emotion, intent), self.DEFAULT_MOVES)

        factor = 0.85 + trust * 0.15 + persuasion * 0.05
        moves = [
            move.model_copy(
                update={"confidence": round(min(self.CONFIDENCE_CAP, move.confidence * factor), 4)}
            )
            for move in base_moves
        ]

        has_trust_move = any(m.category == PlaybookCategory.BUILD_TRUST for m in moves)
        if trust < self.LOW_TRUST and not has_trust_move:
            logger.debug("Low trust without a trust-building move, inserting rebuild move")
            moves = moves[:2] + [self.REBUILD_TRUST]

        return moves[: self.MAX_MOVES]

    def recommend(self, text: str, trust_level: float, persuasion_level: float) -> PlaybookResult:
        stance = self.analyze(text)
        moves = self.playbook(stance.emotion, stance.intent, trust_level, persuasion_level)
        return PlaybookResult(stance=stance, moves=moves)

    @staticmethod
    def _dominant(lower: str, patterns: Dict, fallback) -> Tuple:
        best, best_hits = fallback, 0
        for label, keywords in patterns.items():
            hits = sum(1 for kw in keywords if kw in lower)
            if hits > best_hits:
                best, best_hits = label, hits
        return best, best_hits

    def _confidence(self, hits: int, fallback: float) -> float:
        if hits == 0:
            return fallback
        return round(min(self.CONFIDENCE_CAP, 0.55 + hits * 0.12), 4)
