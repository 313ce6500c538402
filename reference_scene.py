from ExampleSceneDef import ReferenceSceneExample
from cli import render


render(ReferenceSceneExample())
