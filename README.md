# rayscene

`rayscene` loads text scene descriptions and works with what they describe.
A scene holds a perspective camera, a background colour, lights, Phong
materials and a tree of objects:

- spheres, planes, triangles and OBJ triangle meshes
- transforms (scale, translate, rotations, raw 4×4 matrices) wrapped around any object
- Bézier and B-spline curves, and surfaces of revolution swept from a curve profile

Rays can be cast into the scene and shaded, and images can be read and
written as PPM, TGA and BMP. An arc-ball camera controller turns mouse
clicks and drags into camera rotation, panning and zoom.

## Installing

```
pip install .
```

The only runtime dependency is numpy.

## Library use

```python
from rayscene.scene_parser import SceneParser
from rayscene.geometry import Hit
from rayscene.image import Image

scene = SceneParser("scene.txt")
camera = scene.camera
image = Image(camera.width, camera.height)

for y in range(camera.height):
    for x in range(camera.width):
        ray = camera.generate_ray((x, y))
        hit = Hit()
        if scene.group.intersect(ray, hit, 0.0):
            point = ray.point_at(hit.t)
            color = sum(
                hit.material.shade(ray, hit, *light.illumination(point))
                for light in scene.lights
            )
        else:
            color = scene.background_color
        image.set_pixel(x, y, color)

image.save("out.bmp")
```

`SceneParser` accepts only files whose names end in `.txt`. It exposes
`camera`, `background_color`, `lights`, `materials` and `group`, plus
`light(index)` and `material(index)`. It warns when the scene has no
lights. Malformed scene files raise `SceneParseError`.

`Image.save` writes BMP when the name ends in `.bmp` and TGA otherwise;
`save_ppm`, `load_ppm` and `load_tga` handle the other formats.

Curves can be sampled directly:

```python
from rayscene.curve import BezierCurve

curve = BezierCurve([(0, 0, 0), (1, 2, 0), (2, -1, 0), (3, 0, 0)])
for point in curve.discretize(30):
    print(point.vertex, point.tangent)
```

A `BezierCurve` needs 3n+1 control points; a `BsplineCurve` needs at
least four. A `RevSurface` turns a curve lying in the xy plane into a
`SurfaceMesh` (vertices, normals and triangle index triples) with
`tessellate(resolution=30, steps=40)`. Curves and surfaces of revolution
are never hit by rays.

`rayscene.camera_controller.CameraController` wraps a `PerspectiveCamera`;
call `mouse_click(Button.LEFT | MIDDLE | RIGHT, x, y)`, `mouse_drag(x, y)`
and `mouse_release(x, y)` from any UI toolkit to orbit, pan or zoom.

## What it does not do

The package has no command-line program and opens no window: there is no
interactive viewer or on-screen preview. Rendering a picture means writing
a loop like the one above and saving the `Image`.

## Running the tests

```
pip install .[test]
pytest
```