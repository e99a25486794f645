from pyreactive import Component, Param, State, after_mount, before_mount


class Greeting(Component):
    name = Param("world", type=str)

    def render(self):
        with self.div(class_="greeting"):
            self.h1(f"Hello {self.name}!")


class TodoItem(Component):
    text = Param(type=str)
    done = Param(False, type=bool)

    def render(self):
        self.li(self.text, class_=["todo", "done" if self.done else "open"])


class TodoList(Component):
    items = Param(None, type=[str])
    title = Param("Todo", type=str)
    filter = State("")

    @before_mount
    def pick_filter(self):
        self.filter = self.params.get("q", "")

    def render(self):
        with self.section(class_="todos"):
            self.h2(self.title)
            with self.ul():
                for i, text in enumerate(self.items or []):
                    if self.filter and self.filter not in text:
                        continue
                    self.TodoItem(text=text, key=f"todo-{i}")


class Clock(Component):
    ticks = State(0)

    @after_mount
    def started(self):
        self.ticks += 1

    def render(self):
        self.span(f"ticks: {self.ticks}", data_ticks=self.ticks)


class Pages:
    class Home(Component):
        title = Param("Home", type=str)

        def render(self):
            with self.main():
                self.Greeting(name=self.title)
                self.Clock()
