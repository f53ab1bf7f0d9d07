"""
# Pipeline Core — buildflow

Este pacote define os **contratos canônicos** e as **estruturas fundamentais**
que compõem um pipeline de build no buildflow.

Um pipeline é modelado como um **DAG explícito de Tasks**, onde:
- cada Task declara nome, dependências, critérios e política de erro
- a execução é coordenada exclusivamente pelo Engine
- o ambiente é consultado apenas via `RunContext` (somente leitura)

## Componentes

- **types**
  - `TaskStatus`: estados finais de uma task (skipped, succeeded, failed)
  - `ErrorPolicy`: stop-on-error / defer-on-error
  - `RunState`: ciclo de vida de uma invocação
  - `TaskReport`: resultado imutável de uma task

- **task**
  - `Task`: definição imutável
  - `SingleAction` / `ForEachAction`: variantes de ação
  - `Criterion`: predicado de execução
  - `make_task`: superfície declarativa de definição

- **registry**
  - `TaskRegistry`: unicidade de nomes e ordem de registro

## Limites Explícitos

- Não constrói o grafo nem agenda execução
- Não executa ações
- Não contém lógica de build concreta (compilar, testar, publicar)
"""
