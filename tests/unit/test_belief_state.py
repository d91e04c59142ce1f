"""
Unit tests for BeliefStateTracker
"""

import threading

import pytest

from negotiation_lens.models import BeliefState, EmotionLabel, IntentLabel, SpeakerRole
from negotiation_lens.services.belief_state_service import BeliefStateTracker


@pytest.fixture
def tracker(missing_config):
    return BeliefStateTracker(config=missing_config)


class TestBeliefStateTransitions:
    """신뢰 상태 전이 테스트"""

    def test_initial_state_from_config(self, tracker):
        state = tracker.state
        assert state.trust_level == 50.0
        assert state.persuasion_level == 0.0
        assert state.concerns == []
        assert state.per_speaker_state == {}

    def test_cooperative_intent_raises_trust_and_persuasion(self, tracker, make_entry):
        state = tracker.fold(make_entry(intent=IntentLabel.COOPERATE))
        assert state.trust_level == 52.0
        assert state.persuasion_level == 1.0

    def test_negotiate_raises_persuasion(self, tracker, make_entry):
        state = tracker.fold(make_entry(intent=IntentLabel.NEGOTIATE))
        assert state.persuasion_level == 2.0
        assert state.trust_level == 50.0

    def test_threat_with_anger(self, tracker, make_entry):
        state = tracker.fold(make_entry(emotion=EmotionLabel.ANGER, intent=IntentLabel.MAKE_THREAT))
        # -3 threat, -2 negative emotion
        assert state.trust_level == 45.0
        assert state.concerns == ["hostility"]

    def test_negative_signals_stack(self, tracker, make_entry):
        # Given: deflection and disgust in the same entry
        entry = make_entry(emotion=EmotionLabel.DISGUST, intent=IntentLabel.DENY_ACCUSATION)

        # When
        state = tracker.fold(entry)

        # Then: -2 deflection, -2 negative emotion, no concern for disgust
        assert state.trust_level == 46.0
        assert state.persuasion_level == 0.0
        assert state.concerns == []

    def test_deflecting_intent(self, tracker, make_entry):
        state = tracker.fold(make_entry(intent=IntentLabel.DENY_ACCUSATION))
        assert state.trust_level == 48.0

    def test_apply_is_pure(self, tracker, make_entry):
        before = BeliefState(trust_level=50.0)
        after = tracker.apply(before, make_entry(emotion=EmotionLabel.JOY))
        assert before.trust_level == 50.0
        assert after.trust_level == 52.0

    def test_levels_stay_bounded(self, missing_config, make_entry):
        low = BeliefStateTracker(initial_trust=1.0, config=missing_config)
        for _ in range(10):
            state = low.fold(make_entry(emotion=EmotionLabel.ANGER, intent=IntentLabel.MAKE_THREAT))
            assert 0.0 <= state.trust_level <= 100.0
        assert state.trust_level == 0.0

        high = BeliefStateTracker(initial_trust=99.0, initial_persuasion=99.0, config=missing_config)
        for _ in range(10):
            state = high.fold(make_entry(emotion=EmotionLabel.JOY, intent=IntentLabel.NEGOTIATE))
            assert 0.0 <= state.trust_level <= 100.0
            assert 0.0 <= state.persuasion_level <= 100.0
        assert state.persuasion_level == 100.0


class TestConcerns:
    """우려 목록 테스트"""

    def test_no_duplicates(self, tracker, make_entry):
        tracker.fold(make_entry(emotion=EmotionLabel.ANGER))
        state = tracker.fold(make_entry(emotion=EmotionLabel.ANGER))
        assert state.concerns == ["hostility"]

    def test_order_is_append_only(self, tracker, make_entry):
        tracker.fold(make_entry(emotion=EmotionLabel.FEAR))
        state = tracker.fold(make_entry(emotion=EmotionLabel.ANGER, toxicity=["threat"]))
        assert state.concerns == ["fear", "toxicity", "hostility"]

    def test_capacity_drops_new_concerns(self, missing_config, make_entry):
        tracker = BeliefStateTracker(max_concerns=2, config=missing_config)
        tracker.fold(make_entry(emotion=EmotionLabel.FEAR))
        tracker.fold(make_entry(emotion=EmotionLabel.ANGER))
        state = tracker.fold(make_entry(toxicity=["threat"]))
        assert state.concerns == ["fear", "hostility"]


class TestSpeakerState:
    def test_per_speaker_counts(self, tracker, make_entry):
        tracker.fold(make_entry(speaker=SpeakerRole.OPERATOR))
        tracker.fold(make_entry(speaker=SpeakerRole.SUBJECT, emotion=EmotionLabel.FEAR))
        state = tracker.fold(make_entry(speaker=SpeakerRole.SUBJECT, emotion=EmotionLabel.JOY))

        assert state.per_speaker_state["Operator"].entry_count == 1
        assert state.per_speaker_state["Subject"].entry_count == 2
        assert state.per_speaker_state["Subject"].dominant_emotion == EmotionLabel.JOY


class TestFoldOrdering:
    """fold 순서 및 격리 테스트"""

    def test_fold_order_matters(self, missing_config, make_entry):
        # Same entries, different order: concern order follows arrival order
        fear = make_entry(emotion=EmotionLabel.FEAR)
        anger = make_entry(emotion=EmotionLabel.ANGER)

        a = BeliefStateTracker(config=missing_config)
        a.fold_all([fear, anger])
        b = BeliefStateTracker(config=missing_config)
        b.fold_all([anger, fear])

        assert a.state.concerns == ["fear", "hostility"]
        assert b.state.concerns == ["hostility", "fear"]

    def test_concurrent_folds_are_serialized(self, tracker, make_entry):
        entry = make_entry(intent=IntentLabel.NEGOTIATE)

        def worker():
            for _ in range(10):
                tracker.fold(entry)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        state = tracker.state
        assert state.persuasion_level == 80.0
        assert state.per_speaker_state["Subject"].entry_count == 40

    def test_trackers_are_isolated(self, missing_config, make_entry):
        a = BeliefStateTracker(config=missing_config)
        b = BeliefStateTracker(config=missing_config)
        a.fold(make_entry(emotion=EmotionLabel.ANGER))
        assert b.state.concerns == []

    def test_reset(self, tracker, make_entry):
        tracker.fold(make_entry(emotion=EmotionLabel.ANGER))
        tracker.reset()
        assert tracker.state == tracker.initial_state()
