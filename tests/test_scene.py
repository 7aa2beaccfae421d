from tr7rt.mathutil import Matrix, Vector
from tr7rt.scene import Scene, SceneEntity, SceneId, SceneManager


class RecordingDrawable:
    def __init__(self):
        self.calls = []

    def draw(self, matrix, is_moved):
        self.calls.append((matrix, is_moved))


def test_new_entity_defaults():
    scene = Scene()
    entity = scene.create_entity()
    assert entity.entity_index == -1
    assert entity.drawable is None
    assert entity.scene is scene


def test_create_entity_appends_in_order():
    scene = Scene()
    first = scene.create_entity()
    second = scene.create_entity()
    assert scene.entities == [first, second]


def test_set_matrix_and_drawable():
    entity = SceneEntity(Scene())
    matrix = Matrix(col0=Vector(1.0, 2.0, 3.0, 4.0))
    drawable = RecordingDrawable()
    entity.set_matrix(matrix)
    entity.drawable = drawable
    entity.update()
    assert entity.matrix is matrix
    assert entity.drawable is drawable


def test_render_draws_attached_drawables():
    scene = Scene()
    drawn = scene.create_entity()
    scene.create_entity()
    drawable = RecordingDrawable()
    drawn.drawable = drawable
    scene.render(None)
    assert drawable.calls == [(drawn.matrix, False)]


def test_release_clears_entities():
    scene = Scene()
    scene.create_entity()
    scene.release()
    assert scene.entities == []


def test_manager_create_sets_instance():
    manager = SceneManager.create()
    assert SceneManager.instance is manager


def test_create_scene_uses_device():
    device = object()
    scene = SceneManager().create_scene(device, SceneId("main", 1))
    assert scene.render_device is device
    assert scene.entities == []