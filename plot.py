"""Plot the deal arc, flip angle and fold fade as the table actually plays them.

Samples real clips from the motion planner on a bare world so tuning changes
in DealTimings show up here unchanged. Run with: ``python plot.py``
"""
import os
from dataclasses import replace
import sys

import numpy as np
import matplotlib.pyplot as plt

ROOT = os.path.dirname(__file__)
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from esper import World

from tablefx.animation.motion import MotionPlanner
from tablefx.components.card_face import CardFace
from tablefx.components.transform import Transform
from tablefx.components.visibility import Visibility


def sample(clip, world, steps=120):
    clip.begin(world)
    dt = clip.duration / steps
    times, frames = [0.0], [replace(clip.transform)]
    for i in range(steps):
        clip.advance(dt)
        times.append((i + 1) * dt)
        frames.append(replace(clip.transform))
    return np.array(times), frames


world = World()
card = world.create_entity(Transform(), CardFace(card="As"), Visibility())
planner = MotionPlanner()

deal_t, deal_frames = sample(planner.deal(card, (512.0, 480.0), (300.0, 150.0)), world)
flip_t, flip_frames = sample(planner.flip(card, True), world)
fold_t, fold_frames = sample(planner.fold(card, (512.0, 480.0)), world)

fig, (ax_path, ax_flip, ax_fold) = plt.subplots(1, 3, figsize=(14, 4))
ax_path.plot([f.x for f in deal_frames], [f.y for f in deal_frames], label="deal path")
ax_path.plot([512.0, 300.0], [480.0, 150.0], color="gray", linestyle="--", label="straight line")
ax_path.set_title("Deal arc (deck -> seat)")
ax_path.legend()
ax_flip.plot(flip_t, [f.flip_angle for f in flip_frames])
ax_flip.axvline(planner.timings.flip_duration / 2, color="gray", linestyle="--", label="face swap")
ax_flip.set_title("Flip angle (degrees)")
ax_flip.legend()
ax_fold.plot(fold_t, [f.opacity for f in fold_frames], label="opacity")
ax_fold.plot(fold_t, [f.rotation / planner.timings.fold_tilt_degrees for f in fold_frames], label="tilt (normalized)")
ax_fold.set_title("Fold retraction")
ax_fold.legend()
for ax in (ax_path, ax_flip, ax_fold):
    ax.grid(True)
plt.tight_layout()
plt.show()
