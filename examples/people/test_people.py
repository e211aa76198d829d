from people import People, Person


ELSA = Person('Elsa', 'female', 12, 30_123_123)
PEPE = Person('Pepe', 'male', 18, 30_123_121)
JUAN = Person('Juan', 'male', 68, 1_321_120)
ZULEMA = Person('Zulema', 'female', 80, 4_123_121)


def everyone():
    return People(ELSA, PEPE, JUAN, ZULEMA)


def test_retired():
    assert everyone().retired() == [JUAN, ZULEMA]


def test_draftable():
    assert People(PEPE, JUAN).is_draftable()
    assert not everyone().is_draftable()


def test_drafted():
    assert everyone().drafted() == [PEPE]
