"""
ConversationSession 통합 테스트

테스트 케이스:
1. 영어 발화 분류 및 신뢰 상태 갱신
2. 비영어 발화 번역 후 분류
3. 위협 발화 반복 시 긴급 개입 예측
4. 전략 추천 및 검사
5. 안전 지표 및 세션 지표
6. 영속화 계층용 출력 (raw transcript, pattern tuples)
7. 세션 격리 및 동시성
8. 의미 분석 및 협상 플레이북 뷰
"""

import threading

import pytest

from negotiation_lens.models import (
    ConversationDirection,
    EmotionLabel,
    InsufficientData,
    IntentLabel,
    NegotiationEmotion,
    NegotiationIntent,
    PatternPrediction,
    ScreeningStatus,
    SessionPreferences,
    SpeakerRole,
    Urgency,
)
from negotiation_lens.services.session_analysis_service import ConversationSession


@pytest.fixture
def session(missing_config):
    return ConversationSession(config=missing_config)


class TestAddEntry:
    """발화 추가 테스트"""

    def test_english_threat(self, session):
        # Given: an angry English threat
        text = "I am angry and I will hurt you"

        # When
        entry = session.add_entry(text, SpeakerRole.SUBJECT)

        # Then
        assert entry.detected_language == "en"
        assert entry.analysis_text == text
        assert entry.top_emotion == EmotionLabel.ANGER
        assert entry.top_intent == IntentLabel.MAKE_THREAT
        assert any(f.flag_type == "threat" for f in entry.toxicity_flags)
        assert 1 <= len(entry.strategies) <= 5

        state = session.belief_state
        assert state.trust_level == 45.0
        assert state.concerns == ["toxicity", "hostility"]

    def test_spanish_is_translated_for_analysis(self, session):
        entry = session.add_entry("hola, necesito ayuda por favor", SpeakerRole.SUBJECT)

        assert entry.detected_language == "es"
        assert entry.analysis_text == "hello, I need ayuda please"
        assert entry.text == "hola, necesito ayuda por favor"
        assert entry.top_intent == IntentLabel.REQUEST_HELP

    def test_translation_can_be_disabled(self, missing_config):
        prefs = SessionPreferences(translate_for_analysis=False)
        session = ConversationSession(preferences=prefs, config=missing_config)
        entry = session.add_entry("hola, necesito ayuda por favor")
        assert entry.analysis_text == entry.text

    def test_supplied_language_is_trusted(self, session):
        entry = session.add_entry("hello there", detected_language="en")
        assert entry.detected_language == "en"

    def test_speaker_accepts_string(self, session):
        entry = session.add_entry("Okay, I understand", "Operator")
        assert entry.speaker == SpeakerRole.OPERATOR

    def test_unrecognized_speaker_stored_as_unknown(self, session, caplog):
        # Given: a speaker outside the role set (wrong case)
        with caplog.at_level("WARNING"):
            # When
            entry = session.add_entry("hello there friend", "operator")

        # Then
        assert entry.speaker == SpeakerRole.UNKNOWN
        assert session.raw_transcript() == "[Unknown] hello there friend"
        assert session.belief_state.per_speaker_state["Unknown"].entry_count == 1
        assert "Unrecognized speaker" in caplog.text

    def test_entries_are_frozen(self, session):
        entry = session.add_entry("hello there")
        with pytest.raises(Exception):
            entry.text = "changed"

    def test_entries_keep_arrival_order(self, session):
        for text in ("first message", "second message", "third message"):
            session.add_entry(text)
        assert [e.text for e in session.entries] == ["first message", "second message", "third message"]


class TestPredictionAndStrategies:
    """예측 및 전략 테스트"""

    def test_prediction_requires_history(self, session):
        session.add_entry("hello there")
        assert isinstance(session.prediction(), InsufficientData)

    def test_repeated_threats_call_for_immediate_action(self, session):
        # Given: three angry threats in a row
        for _ in range(3):
            session.add_entry("I am furious, I will hurt you, you will regret this", SpeakerRole.SUBJECT)

        # When
        prediction = session.prediction()

        # Then
        assert isinstance(prediction, PatternPrediction)
        assert prediction.direction == ConversationDirection.ESCALATING
        assert prediction.action_window.urgency == Urgency.IMMEDIATE
        assert session.strategies()[0].strategy == "De-escalation"

    def test_cold_start_strategies(self, session):
        assert [s.strategy for s in session.strategies()] == [
            "Active Listening",
            "Open-Ended Questions",
            "Empathetic Acknowledgment",
        ]

    def test_top_k_from_preferences(self, missing_config):
        session = ConversationSession(
            preferences=SessionPreferences(strategy_top_k=2), config=missing_config
        )
        session.add_entry("Let's make a deal on the terms")
        assert len(session.strategies()) == 2

    def test_screened_strategies_pass(self, session):
        session.add_entry("Let's make a deal on the terms")
        screened = session.screened_strategies()
        assert screened
        assert all(s.status == ScreeningStatus.PASSED for s in screened)

    def test_pattern_profile(self, session):
        assert session.pattern_profile() is None
        session.add_entry("Okay, yes, I agree")
        profile = session.pattern_profile()
        assert profile.entry_count == 1
        assert profile.top_strategy is not None


class TestMetrics:
    """지표 테스트"""

    def test_fresh_session_metrics(self, session):
        metrics = session.trustworthiness_metrics()
        assert metrics.trustworthiness_score == 100

        summary = session.session_metrics()
        assert summary.health_score == 45
        assert summary.exchange_count == 0
        assert summary.dominant_emotion == "neutral"
        assert summary.top_strategy == "Active Listening"

    def test_violation_lowers_scores(self, session):
        session.add_entry("You are an idiot and I hate you", SpeakerRole.SUBJECT)

        metrics = session.trustworthiness_metrics()
        assert metrics.ethical_violation_count == 1
        assert metrics.bias_count == 0
        assert metrics.trustworthiness_score == 90

        summary = session.session_metrics()
        # (48/100*50 + 20) * 0.95
        assert summary.health_score == 42
        assert summary.dominant_emotion == "anger"

    def test_bias_counted_per_category(self, session):
        session.add_entry("Poor people are just lazy")
        assert session.trustworthiness_metrics().bias_count == 1
        assert session.session_metrics().bias_count == 1


class TestPersistenceOutputs:
    """영속화 출력 테스트"""

    def test_raw_transcript(self, session):
        session.add_entry("Hello, can we talk?", SpeakerRole.OPERATOR)
        session.add_entry("What do you want?", SpeakerRole.SUBJECT)
        assert session.raw_transcript() == "[Operator] Hello, can we talk?\n[Subject] What do you want?"

    def test_conversation_patterns(self, session):
        long_text = "I need help " + "x" * 80
        session.add_entry(long_text, SpeakerRole.SUBJECT)
        patterns = session.conversation_patterns()

        assert len(patterns) == 1
        assert patterns[0].speaker_role == "Subject"
        assert patterns[0].intent == "request-help"
        assert patterns[0].topic == long_text[:50]
        assert patterns[0].occurrence == 1

    def test_translate_entry(self, session):
        session.add_entry("hola", detected_language="es")
        assert session.translate_entry(0, "fr") == "bonjour"

    def test_translate_entry_uses_display_language(self, missing_config):
        session = ConversationSession(
            preferences=SessionPreferences(display_language="de"), config=missing_config
        )
        session.add_entry("hola", detected_language="es")
        assert session.translate_entry(0) == "hallo"

    def test_translate_entry_out_of_range(self, session):
        with pytest.raises(IndexError):
            session.translate_entry(3)


class TestDashboardViews:
    """의미 분석 및 협상 플레이북 뷰 테스트"""

    def test_empty_session_views(self, session):
        assert session.semantic_analysis() is None
        assert session.negotiation_playbook() is None

    def test_semantic_analysis_of_latest_entry(self, session):
        session.add_entry("Hello there", SpeakerRole.OPERATOR)
        session.add_entry("John Smith offered $5,000 for the contract", SpeakerRole.SUBJECT)

        result = session.semantic_analysis()
        values = [e.value for e in result.entities]

        assert "Person: John Smith" in values
        assert "Amount: $5,000" in values
        assert result.topics[0].value == "Negotiation"
        assert session.semantic_analysis(1) == result

    def test_semantic_analysis_out_of_range(self, session):
        session.add_entry("Hello there")
        with pytest.raises(IndexError):
            session.semantic_analysis(4)

    def test_negotiation_playbook(self, session):
        session.add_entry("This is an ultimatum: I demand payment or else legal action", SpeakerRole.SUBJECT)

        result = session.negotiation_playbook()

        assert result.stance.emotion == NegotiationEmotion.HOSTILE
        assert result.stance.intent == NegotiationIntent.DEMANDING
        assert result.moves[0].strategy == "De-escalate Tension"
        assert 1 <= len(result.moves) <= 4


class TestIsolationAndConcurrency:
    """세션 격리 및 동시성 테스트"""

    def test_sessions_do_not_share_state(self, missing_config):
        a = ConversationSession(config=missing_config)
        b = ConversationSession(config=missing_config)
        a.add_entry("I am furious and angry")

        assert len(b.entries) == 0
        assert b.belief_state.trust_level == 50.0

    def test_concurrent_add_entry(self, session):
        def worker():
            for _ in range(5):
                session.add_entry("Okay, I will cooperate", SpeakerRole.SUBJECT)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(session.entries) == 20
        assert session.belief_state.per_speaker_state["Subject"].entry_count == 20

    def test_reset(self, session):
        session.add_entry("I am furious and angry")
        session.reset()
        assert session.entries == []
        assert session.belief_state.concerns == []
        assert session.raw_transcript() == ""
