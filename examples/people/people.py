"""A small people registry with a bug in ``People.retired``.

Run ``pytest-mender examples/people/people.py examples/people/test_people.py``
to have the retirement check repaired.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Person:
    name: str
    gender: str
    age: int
    dni: int

    def is_male(self) -> bool:
        return self.gender == 'male'

    def is_female(self) -> bool:
        return self.gender == 'female'


class People:
    """A list of people with a few census queries."""

    def __init__(self, *people: Person) -> None:
        self.people = list(people)

    def retired(self) -> list[Person]:
        """People over the retirement age."""
        return list(filter(lambda person: person.age <= 65, self.people))

    def drafted(self) -> list[Person]:
        """Men with an odd DNI number."""
        men = filter(lambda person: person.is_male(), self.people)
        return [person for person in men if person.dni % 2 == 1]

    def is_draftable(self) -> bool:
        """True when nobody on the list is a woman."""
        return not any(person.is_female() for person in self.people)
