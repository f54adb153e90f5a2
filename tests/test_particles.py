"""Tests for the staggered data-flow particle animation."""
import logging

from docuviz.engine.geometry import link_path
from docuviz.engine.particles import ParticleAnimator
from docuviz.model.graph import Link, Node, ParticleParams

NODES = {
    "a": Node("a", x=0.0, y=0.0, radius=5),
    "b": Node("b", x=100.0, y=0.0, radius=5),
    "c": Node("c", x=200.0, y=0.0, radius=5),
}
LINKS = [Link("a", "b"), Link("b", "c"), Link("c", "a")]


def path_for(link):
    return link_path(NODES.get(link.source), NODES.get(link.target), link)


def animator(scheduler, surface, links=LINKS, **kw):
    kw.setdefault("duration_ms", 1500)
    kw.setdefault("interval_ms", 4000)
    kw.setdefault("stagger_ms", 300)
    return ParticleAnimator(links, ParticleParams(**kw), scheduler, surface, path_for, lambda link: "#fff")


def test_one_particle_per_link_per_cycle(scheduler, surface):
    anim = animator(scheduler, surface)
    anim.start()

    scheduler.advance(0)
    assert len(surface.added) == 1
    scheduler.advance(1000)
    assert len(surface.added) == 3
    assert [p.offset_ms for p in surface.added] == [0, 300, 600]
    assert [p.born_ms for p in surface.added] == [0, 300, 600]
    assert [p.link for p in surface.added] == LINKS


def test_particles_are_removed_after_their_duration(scheduler, surface):
    anim = animator(scheduler, surface)
    anim.start()

    scheduler.advance(1499)
    assert len(anim.live) == 3
    scheduler.advance(1)
    assert len(anim.live) == 2
    scheduler.advance(600)
    assert anim.live == []
    assert surface.particles == {}
    assert anim.removed == 3


def test_cycles_repeat_on_the_interval(scheduler, surface):
    anim = animator(scheduler, surface)
    anim.start()
    scheduler.advance(3999)
    assert anim.cycles == 1
    scheduler.advance(1)
    assert anim.cycles == 2
    scheduler.advance(1000)
    assert len(surface.added) == 6
    # a link never carries two particles at once
    links = [p.link for p in anim.live]
    assert len(links) == len(set(links))


def test_cancel_stops_everything(scheduler, surface):
    anim = animator(scheduler, surface)
    anim.start()
    scheduler.advance(400)
    anim.cancel()

    assert not anim.is_running
    assert surface.particles == {}
    scheduler.advance(10_000)
    assert len(surface.added) == 2


def test_overlapping_interval_is_stretched(scheduler, surface, caplog):
    with caplog.at_level(logging.WARNING):
        anim = animator(scheduler, surface, interval_ms=1000)
    assert anim.pass_length_ms() == 2100
    assert anim.interval_ms == 2400
    assert "overlaps" in caplog.text


def test_explicit_delays_override_the_stagger(scheduler, surface):
    links = [Link("a", "b", delay_ms=0), Link("b", "c", delay_ms=400)]
    anim = animator(scheduler, surface, links=links, duration_ms=800)
    assert anim.offsets == [0, 400]


def test_excluded_links_carry_no_particles(scheduler, surface):
    anim = animator(scheduler, surface, exclude=lambda link: link.source == "c")
    anim.start()
    scheduler.advance(1000)
    assert len(anim.eligible) == 2
    assert {p.link.source for p in surface.added} == {"a", "b"}


def test_links_with_missing_endpoints_are_skipped(scheduler, surface):
    anim = animator(scheduler, surface, links=[Link("a", "ghost"), Link("a", "b")])
    anim.start()
    scheduler.advance(1000)
    assert [p.link.target for p in surface.added] == ["b"]


def test_particle_moves_at_constant_rate(scheduler, surface):
    anim = animator(scheduler, surface)
    anim.start()
    scheduler.advance(0)
    particle = surface.added[0]
    assert particle.position(0) == (0.0, 0.0)
    assert particle.progress(750) == 0.5
    assert particle.progress(5000) == 1.0
