# src/buildflow/core/__init__.py
"""
Core do buildflow.

Este pacote reúne a implementação canônica do engine de orquestração de
tasks de build, independente das ações concretas (compilar, testar,
empacotar, publicar), que são colaboradores opacos.

Componentes principais:
    - pipeline     → Task, variantes de ação, TaskRegistry e tipos de status
    - engine       → grafo de dependências, scheduler, execução e runner
    - run_context  → visão imutável do ambiente (CI, SO, variáveis)
    - config       → resolução de configuração (merge, validação, hashing)
    - traceability → Run Log e Event Log da invocação

Princípios fundamentais:
    - Erros estruturais falham antes de qualquer task executar
    - Falhas de tasks são capturadas e reportadas, nunca silenciadas
    - Execução estritamente sequencial e determinística
"""
