"""Tests for MemoryStore sequence ids and dedup lookups."""


def test_fact_ids_strictly_increase(db, persona):
    ids = [db.memory.add_fact(persona.id, f"fact number {n} about topic {n}").seq for n in range(3)]
    assert ids == [1, 2, 3]


def test_fact_ids_never_reused_after_delete(db, persona):
    db.memory.add_fact(persona.id, "first fact")
    second = db.memory.add_fact(persona.id, "second fact")
    assert db.memory.delete_fact(persona.id, second.seq)

    third = db.memory.add_fact(persona.id, "third fact")

    assert third.seq == 3
    assert db.memory.get_memory(persona.id).max_fact_id == 3


def test_summary_ids_independent_of_fact_ids(db, persona):
    db.memory.add_fact(persona.id, "a fact")
    summary = db.memory.add_summary(persona.id, "a summary", conversation_id="7")
    assert summary.seq == 1
    memory = db.memory.get_memory(persona.id)
    assert (memory.max_fact_id, memory.max_summary_id) == (1, 1)


def test_ids_are_per_persona(db, persona):
    other = db.personas.create(name="Other", model="openai/gpt-4o")
    db.memory.add_fact(persona.id, "fact for levo")
    fact = db.memory.add_fact(other.id, "fact for other")
    assert fact.seq == 1


def test_get_memory_orders_by_id_and_reads_legacy(db):
    persona = db.personas.create(
        name="Legacy",
        model="openai/gpt-4o",
        manual_facts=["likes jazz"],
        auto_facts=[{"fact": "old", "timestamp": "2024-01-01T00:00:00Z", "conversationId": "c"}],
        current_summary="old summary",
    )
    db.memory.add_fact(persona.id, "one")
    db.memory.add_fact(persona.id, "two")

    memory = db.memory.get_memory(persona.id)

    assert [f.id for f in memory.facts] == [1, 2]
    assert memory.manual_facts == ["likes jazz"]
    assert memory.auto_facts[0].conversation_id == "c"
    assert memory.current_summary == "old summary"


def test_find_duplicate_fact(db, persona):
    stored = db.memory.add_fact(persona.id, "User loves green tea")
    assert db.memory.find_duplicate_fact(persona.id, "user   LOVES green tea").seq == stored.seq
    assert db.memory.find_duplicate_fact(persona.id, "User owns a bicycle") is None


def test_add_fact_unknown_persona_returns_none(db):
    assert db.memory.add_fact(999, "orphan") is None


def test_empty_memory_has_zero_maxima(db, persona):
    memory = db.memory.get_memory(persona.id)
    assert (memory.max_fact_id, memory.max_summary_id) == (0, 0)
